"""Persisted queue inspection commands."""

import asyncio
import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer

from fgwork.cli.console import console, dim, error, success, warning
from fgwork.config.models import FgworkConfig
from fgwork.scheduling.errors import SnapshotError
from fgwork.scheduling.types import Job, JobQueue, decode_snapshot
from fgwork.store import Store, create_store


def _format_countdown(due_time: datetime) -> str:
    """Format a countdown string for a job's due time."""
    now = datetime.now(UTC)
    if due_time <= now:
        return "[yellow]overdue[/yellow]"

    total_seconds = int((due_time - now).total_seconds())

    if total_seconds < 60:
        return f"in {total_seconds}s"

    total_minutes = total_seconds // 60
    if total_minutes < 60:
        return f"in {total_minutes}m"

    hours = total_minutes // 60
    minutes = total_minutes % 60
    if hours < 24:
        if minutes:
            return f"in {hours}h {minutes}m"
        return f"in {hours}h"

    days = hours // 24
    hours = hours % 24
    if hours:
        return f"in {days}d {hours}h"
    return f"in {days}d"


def register(app: typer.Typer) -> None:
    """Register the queue command."""

    @app.command()
    def queue(
        ctx: typer.Context,
        action: Annotated[
            str | None,
            typer.Argument(help="Action: list, show, drop"),
        ] = None,
        queue_id: Annotated[
            str | None,
            typer.Option("--id", "-i", help="Queue ID for show/drop"),
        ] = None,
        config_path: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="Path to configuration file"),
        ] = None,
        as_json: Annotated[
            bool,
            typer.Option("--json", help="Print the queue as JSON (show)"),
        ] = False,
        force: Annotated[
            bool,
            typer.Option("--force", "-f", help="Drop without confirmation"),
        ] = False,
        verbose: Annotated[
            bool,
            typer.Option("--verbose", "-v", help="Enable debug logging (overrides logging.level)"),
        ] = False,
    ) -> None:
        """Inspect queues persisted in the store.

        Examples:
            fgwork queue list                   # List stored queues
            fgwork queue show --id reminders    # Show pending jobs
            fgwork queue drop --id reminders    # Delete a stored queue
        """
        if action is None:
            typer.echo(ctx.get_help())
            raise typer.Exit(0)

        from fgwork.config import ConfigError, load_config
        from fgwork.logging import configure_logging

        try:
            config = load_config(config_path)
        except (ConfigError, FileNotFoundError) as e:
            error(str(e))
            raise typer.Exit(1) from None

        configure_logging(
            level="DEBUG" if verbose else config.logging.level,
            log_to_file=config.logging.log_to_file,
        )

        if action not in ("list", "show", "drop"):
            error(f"Unknown action: {action}")
            console.print("Valid actions: list, show, drop")
            raise typer.Exit(1)

        if action != "list" and queue_id is None:
            error(f"--id is required for {action}")
            raise typer.Exit(1)

        store = _open_store(config)

        if action == "list":
            _queue_list(store)
        elif action == "show":
            assert queue_id is not None
            _queue_show(store, queue_id, as_json)
        else:
            assert queue_id is not None
            _queue_drop(store, queue_id, force)


def _open_store(config: FgworkConfig) -> Store:
    if config.store.backend != "file":
        warning(f"Store backend '{config.store.backend}' keeps nothing on disk")
    store = create_store(config.store)
    asyncio.run(store.init())
    return store


def _load_jobs(store: Store, queue_id: str) -> list[Job] | None:
    raw = asyncio.run(store.read(queue_id))
    if raw is None:
        return None
    return decode_snapshot(raw, queue_id=queue_id)


def _queue_list(store: Store) -> None:
    """List all stored queues."""
    from rich.table import Table

    queue_ids = sorted(asyncio.run(store.keys()))
    if not queue_ids:
        warning("No stored queues found")
        return

    table = Table(show_header=True)
    table.add_column("Queue")
    table.add_column("Jobs", justify="right")
    table.add_column("Next Due")

    for queue_id in queue_ids:
        try:
            jobs = _load_jobs(store, queue_id) or []
        except SnapshotError:
            table.add_row(queue_id, "[red]corrupt[/red]", "")
            continue
        next_due = min((job.due_time for job in jobs), default=None)
        table.add_row(
            queue_id,
            str(len(jobs)),
            _format_countdown(next_due) if next_due else dim("none"),
        )

    console.print(table)
    console.print(f"\n{dim(f'Total: {len(queue_ids)} queue(s)')}")


def _queue_show(store: Store, queue_id: str, as_json: bool) -> None:
    """Show the jobs stored for one queue."""
    from rich.table import Table

    try:
        jobs = _load_jobs(store, queue_id)
    except SnapshotError as e:
        error(str(e))
        raise typer.Exit(1) from None

    if jobs is None:
        error(f"No stored queue with ID {queue_id}")
        raise typer.Exit(1)

    if as_json:

        async def _noop(job: Job) -> None:
            return None

        stored = JobQueue(id=queue_id, process=_noop, jobs=jobs)
        console.print_json(json.dumps(stored.to_dict()))
        return

    if not jobs:
        warning(f"Queue {queue_id} has no pending jobs")
        return

    table = Table(show_header=True, title=f"Queue {queue_id}")
    table.add_column("ID", style="dim")
    table.add_column("Due")
    table.add_column("Countdown")
    table.add_column("If Overdue")
    table.add_column("Data")

    for job in jobs:
        keys = ", ".join(sorted(job.data)) if job.data else dim("none")
        table.add_row(
            job.id,
            job.due_time.isoformat(timespec="seconds"),
            _format_countdown(job.due_time),
            job.due_behavior.value,
            keys,
        )

    console.print(table)
    console.print(f"\n{dim(f'Total: {len(jobs)} job(s)')}")


def _queue_drop(store: Store, queue_id: str, force: bool) -> None:
    """Delete a stored queue snapshot."""
    try:
        jobs = _load_jobs(store, queue_id)
    except SnapshotError:
        jobs = []
    if jobs is None:
        warning(f"No stored queue with ID {queue_id}")
        return

    if not force:
        confirm = typer.confirm(
            f"This will delete queue {queue_id} and {len(jobs)} pending job(s). Continue?"
        )
        if not confirm:
            console.print(dim("Cancelled"))
            return

    asyncio.run(store.remove(queue_id))
    success(f"Dropped queue {queue_id} ({len(jobs)} job(s))")
