"""Scheduler exceptions.

Every error carries an ErrorKind so callers can branch on ``err.kind``
instead of on the exception class.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_INITIALIZED = "not_initialized"
    ALREADY_OPEN = "already_open"
    NOT_OPEN = "not_open"
    JOB_NOT_FOUND = "job_not_found"
    SNAPSHOT = "snapshot"


class SchedulerError(Exception):
    """Base exception for all scheduler errors."""

    kind: ErrorKind


class NotInitializedError(SchedulerError):
    """Raised when a queue is opened before WorkManager.init() completed."""

    kind = ErrorKind.NOT_INITIALIZED

    def __init__(self) -> None:
        super().__init__("WorkManager.init() was not called; call it first")


class AlreadyOpenError(SchedulerError):
    """Raised when opening a queue id that is already open."""

    kind = ErrorKind.ALREADY_OPEN

    def __init__(self, queue_id: str):
        self.queue_id = queue_id
        super().__init__(f"Queue already open: {queue_id} (queue ids must be unique)")


class NotOpenError(SchedulerError):
    """Raised when operating on a queue id that was never opened."""

    kind = ErrorKind.NOT_OPEN

    def __init__(self, queue_id: str):
        self.queue_id = queue_id
        super().__init__(f"Queue not open: {queue_id} (call open_queue first)")


class JobNotFoundError(SchedulerError):
    """Raised when removing a job id the queue does not contain."""

    kind = ErrorKind.JOB_NOT_FOUND

    def __init__(self, queue_id: str, job_id: str):
        self.queue_id = queue_id
        self.job_id = job_id
        super().__init__(f"Queue {queue_id} has no job with id {job_id}")


class SnapshotError(SchedulerError):
    """Raised when a persisted snapshot cannot be decoded."""

    kind = ErrorKind.SNAPSHOT

    def __init__(self, queue_id: str, reason: str):
        self.queue_id = queue_id
        self.reason = reason
        super().__init__(f"Invalid snapshot for queue {queue_id or '?'}: {reason}")
