"""Scheduling types.

Public types:
- Job: A single deferred unit of work
- JobQueue: An ordered list of jobs sharing one process callback
- DueBehavior: What to do with a job found past due when its queue opens
- ProcessCallback: Async callback invoked when a job fires
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from fgwork.scheduling.errors import SnapshotError


class DueBehavior(str, Enum):
    """Policy applied to a job that is already past due when its queue opens."""

    EXECUTE = "execute"
    IGNORE = "ignore"

    @classmethod
    def parse(cls, value: Any) -> "DueBehavior":
        """Decode a stored value. Anything unrecognized decodes as IGNORE."""
        if value == cls.EXECUTE.value:
            return cls.EXECUTE
        return cls.IGNORE


def normalize_due_time(value: datetime) -> datetime:
    """Convert to aware UTC at millisecond resolution.

    Snapshots store epoch milliseconds, so anything finer would not
    survive a restart. Naive datetimes are read as local time.
    """
    if value.tzinfo is None:
        value = value.astimezone()
    value = value.astimezone(UTC)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def to_epoch_ms(value: datetime) -> int:
    return (value - _EPOCH) // timedelta(milliseconds=1)


def from_epoch_ms(value: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=value)


@dataclass
class Job:
    """A schedulable unit of work.

    Only id, due_time, data and due_behavior are persisted. The timer
    handle and canceled flag live for the lifetime of the process.
    """

    id: str
    due_time: datetime
    data: dict[str, Any] | None = None
    due_behavior: DueBehavior = DueBehavior.EXECUTE
    # Runtime only
    cancel_handle: asyncio.Task | None = field(default=None, compare=False, repr=False)
    canceled: bool = field(default=False, compare=False, repr=False)
    fired: bool = field(default=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        self.due_time = normalize_due_time(self.due_time)

    @property
    def has_timer(self) -> bool:
        return self.cancel_handle is not None and not self.cancel_handle.done()

    def is_due(self, now: datetime) -> bool:
        return self.due_time <= now

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the snapshot entry form."""
        data: dict[str, Any] = {
            "id": self.id,
            "time": to_epoch_ms(self.due_time),
        }
        if self.data is not None:
            data["data"] = self.data
        data["due_behavior"] = self.due_behavior.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Job":
        """Parse a snapshot entry.

        Raises:
            KeyError, TypeError, ValueError: If required fields are missing
                or malformed.
        """
        time_ms = data["time"]
        if isinstance(time_ms, bool) or not isinstance(time_ms, int | float):
            raise TypeError(f"time must be epoch milliseconds, got {time_ms!r}")
        payload = data.get("data")
        if payload is not None and not isinstance(payload, dict):
            raise TypeError(f"data must be an object, got {type(payload).__name__}")
        return cls(
            id=str(data["id"]),
            due_time=from_epoch_ms(int(time_ms)),
            data=payload,
            due_behavior=DueBehavior.parse(data.get("due_behavior")),
        )


# Process callbacks receive the job that fired; the return value is ignored
ProcessCallback = Callable[[Job], Awaitable[Any]]


@dataclass
class JobQueue:
    """An id-identified, ordered collection of jobs with one process callback."""

    id: str
    process: ProcessCallback
    jobs: list[Job] = field(default_factory=list)

    def find(self, job_id: str) -> Job | None:
        return next((job for job in self.jobs if job.id == job_id), None)

    def discard(self, job: Job) -> bool:
        """Remove this exact job instance. Returns False if it was not present."""
        for i, candidate in enumerate(self.jobs):
            if candidate is job:
                del self.jobs[i]
                return True
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "queue": [job.to_dict() for job in self.jobs]}

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, process: ProcessCallback) -> "JobQueue":
        return cls(
            id=data["id"],
            process=process,
            jobs=[Job.from_dict(entry) for entry in data.get("queue", [])],
        )


def encode_snapshot(jobs: list[Job]) -> str:
    """Encode a queue's jobs as the persisted snapshot string."""
    return json.dumps({"list": [job.to_dict() for job in jobs]})


def decode_snapshot(text: str, *, queue_id: str = "") -> list[Job]:
    """Decode a persisted snapshot string into jobs, preserving order.

    Raises:
        SnapshotError: If the snapshot is not valid JSON or has the wrong shape.
    """
    try:
        payload = json.loads(text)
        entries = payload["list"]
        if not isinstance(entries, list):
            raise TypeError("list must be an array")
        return [Job.from_dict(entry) for entry in entries]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise SnapshotError(queue_id, str(e)) from e
