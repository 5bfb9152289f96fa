"""Configuration module."""

from fgwork.config.loader import get_default_config, load_config
from fgwork.config.models import (
    ConfigError,
    FgworkConfig,
    LoggingConfig,
    SchedulerConfig,
    StoreConfig,
)
from fgwork.config.paths import (
    get_config_path,
    get_fgwork_home,
    get_logs_path,
    get_store_path,
)

__all__ = [
    "ConfigError",
    "FgworkConfig",
    "LoggingConfig",
    "SchedulerConfig",
    "StoreConfig",
    "get_config_path",
    "get_default_config",
    "get_fgwork_home",
    "get_logs_path",
    "get_store_path",
    "load_config",
]
