"""Configuration models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from fgwork.config.paths import get_store_path


class StoreConfig(BaseModel):
    """Where queue snapshots are persisted.

    "null" disables persistence entirely: writes are dropped and every
    queue opens empty.
    """

    backend: Literal["file", "memory", "null"] = "file"
    path: Path = Field(default_factory=get_store_path)

    @field_validator("path")
    @classmethod
    def _expand_path(cls, value: Path) -> Path:
        return value.expanduser()


class SchedulerConfig(BaseModel):
    """Scheduler behavior."""

    # Past-due IGNORE jobs found when a queue opens are removed from the
    # snapshot. When false they stay stored and are skipped on every open.
    discard_ignored_due_jobs: bool = True


class LoggingConfig(BaseModel):
    """Logging output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_to_file: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class ConfigError(Exception):
    """Configuration error."""

    pass


class FgworkConfig(BaseModel):
    """Root configuration model."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
