"""fgwork - foreground work manager.

Schedules delayed jobs inside a running asyncio process and keeps each
queue persisted so pending jobs survive restarts.
"""

from fgwork.scheduling import (
    AlreadyOpenError,
    DueBehavior,
    ErrorKind,
    Job,
    JobNotFoundError,
    NotInitializedError,
    NotOpenError,
    SchedulerError,
    WorkManager,
)

__version__ = "0.1.0"

__all__ = [
    "AlreadyOpenError",
    "DueBehavior",
    "ErrorKind",
    "Job",
    "JobNotFoundError",
    "NotInitializedError",
    "NotOpenError",
    "SchedulerError",
    "WorkManager",
]
