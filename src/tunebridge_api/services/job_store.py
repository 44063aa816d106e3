"""In-memory job store with thread-safe operations."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from tunebridge_api.core.enums import ItemStatus, JobKind, JobStatus
from tunebridge_api.core.models import Job, PlaylistProgress
from tunebridge_api.core.types import Clock, IdGenerator

logger = logging.getLogger(__name__)


class JobStore:
    """In-memory job registry and the single mutation path for job records.

    Thread-Safety:
        All public methods are thread-safe using a single lock. Readers get
        deep copies, so a record is never observed half-updated (e.g. new
        item state without the matching updated_at).

    Responsibilities:
        - Job allocation (id, initial pending items)
        - Lookup by id
        - Field updates for running jobs (logs, item progress, status)
        - Forward-only item transitions; terminal items are frozen

    Capacity:
        Unbounded. Jobs live until process restart; nothing is evicted or
        persisted, and a job is visible only to the process that created it.
    """

    def __init__(self, clock: Clock, id_generator: IdGenerator) -> None:
        """Initialize the job store.

        Args:
            clock: Function returning current datetime (enables testing).
            id_generator: Function generating unique job IDs.
        """
        self._clock = clock
        self._id_generator = id_generator
        self._jobs: OrderedDict[str, Job] = OrderedDict()
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Public API: Job lifecycle
    # -------------------------------------------------------------------------

    def create(self, kind: JobKind, items: Sequence[PlaylistProgress]) -> Job:
        """Create a queued job with the given items.

        The item list is fixed from here on: no item is ever added or removed.

        Args:
            kind: Transfer or sync.
            items: Initial item records (status pending).

        Returns:
            Snapshot of the created job.
        """
        with self._locked():
            job_id = self._id_generator()
            if job_id in self._jobs:
                raise ValueError(f"Duplicate job id: {job_id}")
            now = self._clock()
            job = Job(
                id=job_id,
                kind=kind,
                created_at=now,
                updated_at=now,
                items=[item.model_copy(deep=True) for item in items],
            )
            self._jobs[job.id] = job
            logger.debug("Job created: %s (%s, %d items)", job.id[:8], kind, len(items))
            return job.model_copy(deep=True)

    def get(self, job_id: str) -> Job | None:
        """Get a snapshot of a job by ID.

        Args:
            job_id: The job identifier.

        Returns:
            A deep copy of the job if found, None otherwise.
        """
        with self._locked():
            if job := self._jobs.get(job_id):
                return job.model_copy(deep=True)
            return None

    def get_all(self) -> list[Job]:
        """Get snapshots of all jobs in creation order (oldest first)."""
        with self._locked():
            return [job.model_copy(deep=True) for job in self._jobs.values()]

    # -------------------------------------------------------------------------
    # Public API: Job state transitions (used by the job body only)
    # -------------------------------------------------------------------------

    def start(self, job_id: str) -> bool:
        """Advance a queued job to running.

        Returns:
            True if the job moved to running, False otherwise.
        """
        with self._locked():
            if not (job := self._jobs.get(job_id)):
                return False
            if job.status != JobStatus.QUEUED:
                return False
            job.status = JobStatus.RUNNING
            self._touch(job)
            return True

    def append_log(self, job_id: str, line: str) -> None:
        """Append a line to the job's log.

        Args:
            job_id: The job identifier.
            line: Human-readable log line.
        """
        with self._locked():
            if not (job := self._jobs.get(job_id)):
                return
            job.logs.append(line)
            self._touch(job)
        logger.info("[%s] %s", job_id[:8], line)

    def update_item(
        self,
        job_id: str,
        index: int,
        *,
        status: ItemStatus | None = None,
        total: int | None = None,
        error: str | None = None,
    ) -> bool:
        """Update fields of one item atomically.

        Updates to a finished item, and status changes that would move
        backwards, are ignored.

        Args:
            job_id: The job identifier.
            index: Position of the item in the job's item list.
            status: New item status.
            total: Expected number of tracks.
            error: Error message (only meaningful with status FAILED).

        Returns:
            True if the update was applied.
        """
        with self._locked():
            if not (item := self._get_item(job_id, index)):
                return False
            if item.status.is_finished:
                logger.debug(
                    "Ignoring update to finished item %d of job %s", index, job_id[:8]
                )
                return False
            if status is not None and status.rank < item.status.rank:
                logger.warning(
                    "Ignoring backwards transition %s -> %s for job %s",
                    item.status,
                    status,
                    job_id[:8],
                )
                return False

            if total is not None:
                item.total = total
            if error is not None:
                item.error = error
            if status is not None:
                item.status = status
            self._touch(self._jobs[job_id])
            return True

    def add_progress(self, job_id: str, index: int, count: int) -> bool:
        """Record ``count`` more tracks applied to a running item.

        Updates ``added`` and the ``added/total`` message together.

        Returns:
            True if the progress was recorded.
        """
        with self._locked():
            if not (item := self._get_item(job_id, index)):
                return False
            if item.status != ItemStatus.RUNNING:
                return False
            item.added += count
            item.message = f"{item.added}/{item.total}"
            self._touch(self._jobs[job_id])
            return True

    def fail_pending(self, job_id: str, error: str) -> int:
        """Mark every non-finished item as failed with a shared error.

        Returns:
            Number of items marked failed.
        """
        with self._locked():
            if not (job := self._jobs.get(job_id)):
                return 0
            failed = 0
            for item in self._iter_unfinished(job):
                item.status = ItemStatus.FAILED
                item.error = error
                failed += 1
            if failed:
                self._touch(job)
            return failed

    def finish(self, job_id: str) -> Job | None:
        """Derive and set the terminal job status from its items.

        The job completes only if every item completed. Items still
        unfinished at this point are failed first so the job can never
        remain running.

        Returns:
            Snapshot of the finished job, or None if not found.
        """
        with self._locked():
            if not (job := self._jobs.get(job_id)):
                return None
            if job.status.is_finished:
                return job.model_copy(deep=True)

            for item in self._iter_unfinished(job):
                item.status = ItemStatus.FAILED
                item.error = item.error or "Job ended before this item finished"

            all_completed = all(
                item.status == ItemStatus.COMPLETED for item in job.items
            )
            job.status = JobStatus.COMPLETED if all_completed else JobStatus.FAILED
            self._touch(job)
            logger.info("Job %s %s", job_id[:8], job.status)
            return job.model_copy(deep=True)

    # -------------------------------------------------------------------------
    # Private: Lock management
    # -------------------------------------------------------------------------

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Context manager for thread-safe operations."""
        with self._lock:
            yield

    # -------------------------------------------------------------------------
    # Private: helpers (require lock held)
    # -------------------------------------------------------------------------

    def _get_item(self, job_id: str, index: int) -> PlaylistProgress | None:
        job = self._jobs.get(job_id)
        if job is None or not 0 <= index < len(job.items):
            return None
        return job.items[index]

    def _iter_unfinished(self, job: Job) -> Iterator[PlaylistProgress]:
        return (item for item in job.items if not item.status.is_finished)

    def _touch(self, job: Job) -> None:
        """Bump updated_at, never moving it backwards."""
        job.updated_at = max(job.updated_at, self._clock())
