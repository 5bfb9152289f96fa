"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import typer

from fgwork.cli.console import console, error, success


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        ctx: typer.Context,
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate, paths"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: $FGWORK_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Manage configuration."""
        if action is None:
            typer.echo(ctx.get_help())
            raise typer.Exit(0)

        from rich.table import Table

        from fgwork.config import ConfigError, load_config
        from fgwork.config.paths import get_all_paths, get_config_path

        expanded_path = path.expanduser() if path else get_config_path()

        if action == "show":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                raise typer.Exit(1)

            from rich.syntax import Syntax

            content = expanded_path.read_text()
            syntax = Syntax(content, "toml", line_numbers=True)
            console.print(f"[bold]Config file: {expanded_path}[/bold]\n")
            console.print(syntax)

        elif action == "validate":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                raise typer.Exit(1)

            try:
                config_obj = load_config(expanded_path)
            except ConfigError as e:
                error(str(e))
                raise typer.Exit(1) from None

            table = Table(title="Configuration Summary")
            table.add_column("Setting", style="cyan")
            table.add_column("Value", style="green")
            table.add_row("Store backend", config_obj.store.backend)
            table.add_row("Store path", str(config_obj.store.path))
            table.add_row(
                "Discard ignored due jobs",
                str(config_obj.scheduler.discard_ignored_due_jobs),
            )
            table.add_row("Log level", config_obj.logging.level)
            console.print(table)
            success("Configuration is valid")

        elif action == "paths":
            table = Table(show_header=True)
            table.add_column("Name", style="cyan")
            table.add_column("Path")
            for name, value in get_all_paths().items():
                table.add_row(name, str(value))
            console.print(table)

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: show, validate, paths")
            raise typer.Exit(1)
