"""Scheduling subsystem: deferred job execution in persisted queues.

Public API:
- WorkManager: Registry of open queues; arms timers and persists snapshots

Types:
- Job: A single schedulable unit of work
- JobQueue: Ordered jobs sharing one process callback
- DueBehavior: Policy for jobs found past due when a queue opens
- ProcessCallback: Async callback signature for fired jobs
"""

from fgwork.scheduling.errors import (
    AlreadyOpenError,
    ErrorKind,
    JobNotFoundError,
    NotInitializedError,
    NotOpenError,
    SchedulerError,
    SnapshotError,
)
from fgwork.scheduling.manager import WorkManager
from fgwork.scheduling.types import (
    DueBehavior,
    Job,
    JobQueue,
    ProcessCallback,
    decode_snapshot,
    encode_snapshot,
)

__all__ = [
    "AlreadyOpenError",
    "DueBehavior",
    "ErrorKind",
    "Job",
    "JobNotFoundError",
    "JobQueue",
    "NotInitializedError",
    "NotOpenError",
    "ProcessCallback",
    "SchedulerError",
    "SnapshotError",
    "WorkManager",
    "decode_snapshot",
    "encode_snapshot",
]
