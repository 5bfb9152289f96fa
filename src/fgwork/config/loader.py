"""Configuration loading from TOML files."""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from fgwork.config.models import ConfigError, FgworkConfig
from fgwork.config.paths import get_config_path


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("fgwork.toml"),  # Current directory
        get_config_path(),  # ~/.fgwork/config.toml (or FGWORK_HOME)
        Path("/etc/fgwork/config.toml"),  # System-wide
    ]


def find_config_path() -> Path | None:
    """Return the first default config file that exists, if any."""
    for default_path in _get_default_config_paths():
        expanded = default_path.expanduser()
        if expanded.exists():
            return expanded
    return None


def load_config(path: Path | None = None) -> FgworkConfig:
    """Load configuration from a TOML file.

    Args:
        path: Explicit path to config file. If None, searches default
            locations and falls back to defaults when none exists.

    Returns:
        Validated FgworkConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the file is not valid TOML or fails validation.
    """
    if path is not None:
        config_path: Path | None = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        config_path = find_config_path()

    if config_path is None:
        return get_default_config()

    try:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
        return FgworkConfig.model_validate(raw_config)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {config_path}: {e}") from e


def get_default_config() -> FgworkConfig:
    """Get the default configuration (file store under FGWORK_HOME)."""
    return FgworkConfig()
