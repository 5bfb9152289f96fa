"""CLI command modules."""

from fgwork.cli.commands import config, queue

__all__ = ["config", "queue"]
