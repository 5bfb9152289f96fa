"""Centralized path management for fgwork.

All state (config, store, logs) lives under a single base directory,
overridable with the FGWORK_HOME environment variable.

Default locations:
- Linux/macOS: ~/.fgwork
- Windows: %USERPROFILE%\\.fgwork
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "FGWORK_HOME"


@lru_cache(maxsize=1)
def get_fgwork_home() -> Path:
    """Get the base directory for all fgwork data.

    Resolution order:
    1. FGWORK_HOME environment variable (if set)
    2. Platform default (~/.fgwork)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".fgwork"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_fgwork_home() / "config.toml"


def get_store_path() -> Path:
    """Get the default file store path (queue snapshots)."""
    return get_fgwork_home() / "store.json"


def get_logs_path() -> Path:
    """Get the default logs directory path."""
    return get_fgwork_home() / "logs"


def get_all_paths() -> dict[str, Path]:
    """Get all standard paths for debugging/display."""
    return {
        "home": get_fgwork_home(),
        "config": get_config_path(),
        "store": get_store_path(),
        "logs": get_logs_path(),
    }
