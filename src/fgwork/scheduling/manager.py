"""Work manager: registry of open queues, job timers and persistence.

Every mutating operation follows the same choreography: change the
in-memory queue, then write the queue's whole snapshot to the store.
Timers are asyncio tasks, one per pending job, and everything runs on a
single event loop, so the registry is never touched from two places at
once. State is re-checked after each await instead of being locked.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from fgwork.config.models import FgworkConfig
from fgwork.scheduling.errors import (
    AlreadyOpenError,
    JobNotFoundError,
    NotInitializedError,
    NotOpenError,
)
from fgwork.scheduling.types import (
    DueBehavior,
    Job,
    JobQueue,
    ProcessCallback,
    decode_snapshot,
    encode_snapshot,
    normalize_due_time,
)
from fgwork.store import Store, create_store

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class WorkManager:
    """Schedules jobs in named queues and keeps them persisted.

    Example:
        manager = WorkManager(FileStore())
        await manager.init()

        async def process(job: Job) -> None:
            await send_reminder(job.data)

        await manager.open_queue("reminders", process)
        await manager.add_job(
            "reminders",
            Job(id="r1", due_time=datetime.now(UTC) + timedelta(minutes=5)),
        )
    """

    def __init__(
        self,
        store: Store,
        *,
        discard_ignored: bool = True,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._discard_ignored = discard_ignored
        self._clock = clock or _utcnow
        self._queues: dict[str, JobQueue] = {}
        self._initialized = False

    @classmethod
    def from_config(cls, config: FgworkConfig) -> "WorkManager":
        return cls(
            create_store(config.store),
            discard_ignored=config.scheduler.discard_ignored_due_jobs,
        )

    @property
    def store(self) -> Store:
        return self._store

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def init(self) -> None:
        """Initialize the store. Must complete before any queue is opened."""
        await self._store.init()
        self._initialized = True
        logger.debug("work_manager_initialized", extra={"store": self._store.name})

    # ------------------------------------------------------------------
    # Queue operations
    # ------------------------------------------------------------------

    async def open_queue(self, queue_id: str, process: ProcessCallback) -> None:
        """Open a queue, restoring its snapshot if one exists.

        Past-due jobs are handled according to their due behavior before
        this returns; EXECUTE jobs run inline, in stored order. Future
        jobs get timers.

        Raises:
            AlreadyOpenError: If the queue id is already open.
            NotInitializedError: If init() has not been called.
            SnapshotError: If the stored snapshot cannot be decoded.
        """
        if queue_id in self._queues:
            raise AlreadyOpenError(queue_id)
        if not self._initialized:
            raise NotInitializedError()

        cached = await self._store.read(queue_id)
        if cached is None:
            queue = JobQueue(id=queue_id, process=process)
            await self._persist(queue)
        else:
            queue = JobQueue(
                id=queue_id,
                process=process,
                jobs=decode_snapshot(cached, queue_id=queue_id),
            )

        # Another open for the same id may have finished while we awaited the store
        if queue_id in self._queues:
            raise AlreadyOpenError(queue_id)
        self._queues[queue_id] = queue
        logger.info(
            "queue_opened",
            extra={
                "queue.id": queue_id,
                "queue.restored": cached is not None,
                "queue.job_count": len(queue.jobs),
            },
        )

        await self._reconcile(queue)

    async def add_job(self, queue_id: str, job: Job) -> None:
        """Append a job, arm its timer, then persist.

        A job whose due time has already passed fires on the next loop
        iteration. Due behavior only applies to jobs found past due when
        a queue is opened.

        Raises:
            NotOpenError: If the queue is not open.
        """
        queue = self._get_queue(queue_id)
        # The instance may have been removed from this or another queue before
        job.due_time = normalize_due_time(job.due_time)
        job.canceled = False
        job.fired = False
        job.cancel_handle = None
        queue.jobs.append(job)
        self._arm(queue, job)
        logger.debug(
            "job_added",
            extra={
                "queue.id": queue_id,
                "job.id": job.id,
                "job.due_time": job.due_time.isoformat(),
            },
        )
        await self._persist(queue)

    async def remove_job(self, queue_id: str, job_id: str) -> None:
        """Cancel a pending job and remove it from its queue.

        Raises:
            NotOpenError: If the queue is not open.
            JobNotFoundError: If the queue has no job with that id (including
                jobs that already fired).
        """
        queue = self._get_queue(queue_id)
        job = queue.find(job_id)
        if job is None:
            raise JobNotFoundError(queue_id, job_id)

        await self._cancel(job)
        queue.discard(job)
        logger.debug("job_removed", extra={"queue.id": queue_id, "job.id": job_id})
        if self._is_current(queue):
            await self._persist(queue)

    async def clear_queue(self, queue_id: str) -> None:
        """Cancel every job in the queue and persist an empty snapshot.

        Raises:
            NotOpenError: If the queue is not open.
        """
        queue = self._get_queue(queue_id)
        jobs = list(queue.jobs)
        await asyncio.gather(*(self._cancel(job) for job in jobs))
        for job in jobs:
            queue.discard(job)
        logger.info(
            "queue_cleared", extra={"queue.id": queue_id, "queue.job_count": len(jobs)}
        )
        if self._is_current(queue):
            await self._persist(queue)

    async def remove_queue(self, queue_id: str) -> None:
        """Cancel every job, close the queue and delete its snapshot.

        Unlike clear_queue, no empty snapshot is left behind.

        Raises:
            NotOpenError: If the queue is not open.
        """
        queue = self._get_queue(queue_id)
        await asyncio.gather(*(self._cancel(job) for job in list(queue.jobs)))
        if self._queues.get(queue_id) is queue:
            del self._queues[queue_id]
        await self._store.remove(queue_id)
        logger.info("queue_removed", extra={"queue.id": queue_id})

    async def close(self) -> None:
        """Stop every pending timer and forget all open queues.

        Snapshots are left untouched, so the jobs are picked up again the
        next time their queues are opened.
        """
        queues = list(self._queues.values())
        self._queues.clear()
        await asyncio.gather(
            *(self._cancel(job) for queue in queues for job in queue.jobs)
        )
        logger.debug("work_manager_closed", extra={"queue.count": len(queues)})

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def is_open(self, queue_id: str) -> bool:
        return queue_id in self._queues

    def queue_ids(self) -> list[str]:
        return list(self._queues)

    def get_jobs(self, queue_id: str) -> list[Job]:
        """Get a copy of the queue's jobs in insertion order.

        Raises:
            NotOpenError: If the queue is not open.
        """
        return list(self._get_queue(queue_id).jobs)

    def get_stats(self) -> dict[str, Any]:
        jobs = [job for queue in self._queues.values() for job in queue.jobs]
        return {
            "store": self._store.name,
            "queues": len(self._queues),
            "jobs": len(jobs),
            "armed": sum(1 for job in jobs if job.has_timer),
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_queue(self, queue_id: str) -> JobQueue:
        queue = self._queues.get(queue_id)
        if queue is None:
            raise NotOpenError(queue_id)
        return queue

    def _is_current(self, queue: JobQueue) -> bool:
        """Whether this queue instance is still the registered one for its id."""
        return self._queues.get(queue.id) is queue

    async def _persist(self, queue: JobQueue) -> None:
        await self._store.write(queue.id, encode_snapshot(queue.jobs))

    async def _reconcile(self, queue: JobQueue) -> None:
        """Apply due behavior to past-due jobs and arm timers for the rest."""
        discarded = 0
        for job in list(queue.jobs):
            if not self._is_current(queue):
                return
            # Removed or cleared by an earlier job's process callback
            if job.canceled:
                continue

            if not job.is_due(self._clock()):
                self._arm(queue, job)
                continue

            if job.due_behavior is DueBehavior.EXECUTE:
                logger.info(
                    "due_job_executing",
                    extra={
                        "queue.id": queue.id,
                        "job.id": job.id,
                        "job.due_time": job.due_time.isoformat(),
                    },
                )
                await self._run(queue, job)
            elif self._discard_ignored:
                queue.discard(job)
                discarded += 1
                logger.info(
                    "due_job_discarded", extra={"queue.id": queue.id, "job.id": job.id}
                )
            else:
                logger.debug(
                    "due_job_skipped", extra={"queue.id": queue.id, "job.id": job.id}
                )

        if discarded and self._is_current(queue):
            await self._persist(queue)

    def _arm(self, queue: JobQueue, job: Job) -> None:
        delay = max(0.0, (job.due_time - self._clock()).total_seconds())
        job.cancel_handle = asyncio.create_task(
            self._fire_after(queue, job, delay),
            name=f"fgwork-job:{queue.id}:{job.id}",
        )

    async def _fire_after(self, queue: JobQueue, job: Job, delay: float) -> None:
        await asyncio.sleep(delay)
        # A timer can wake after cancellation was requested but before it
        # was delivered; the flag is what decides.
        if job.canceled or not self._is_current(queue):
            return
        try:
            await self._run(queue, job)
        except Exception:
            # Nobody awaits timer tasks, so a failed persist is reported here
            logger.exception(
                "job_persist_failed", extra={"queue.id": queue.id, "job.id": job.id}
            )

    async def _run(self, queue: JobQueue, job: Job) -> None:
        """Invoke the process callback once, then drop the job and persist.

        A failing callback is logged and the job is still dropped so it
        never runs twice in this process.
        """
        job.fired = True
        try:
            await queue.process(job)
        except Exception:
            logger.exception(
                "job_process_failed", extra={"queue.id": queue.id, "job.id": job.id}
            )
        else:
            logger.debug("job_processed", extra={"queue.id": queue.id, "job.id": job.id})
        finally:
            job.cancel_handle = None

        # The callback may have removed the job, cleared or removed the queue
        if queue.discard(job) and self._is_current(queue):
            await self._persist(queue)

    async def _cancel(self, job: Job) -> None:
        """Mark the job canceled and stop its timer if it has not fired.

        A timer that already fired is left alone: its callback may be the
        caller (a process callback removing its own job).
        """
        job.canceled = True
        handle = job.cancel_handle
        if handle is None or handle.done() or job.fired:
            return
        handle.cancel()
        await asyncio.wait({handle})
        job.cancel_handle = None
