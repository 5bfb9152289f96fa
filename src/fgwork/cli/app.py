"""Main CLI application."""

import typer

from fgwork.cli.commands import config, queue

app = typer.Typer(
    name="fgwork",
    help="fgwork - inspect and manage persisted job queues",
    no_args_is_help=True,
)

config.register(app)
queue.register(app)
