"""Command-line interface."""

from fgwork.cli.app import app

__all__ = ["app"]
