from enum import StrEnum


class JobStatus(StrEnum):
    """Status of a background job."""

    QUEUED = "queued"  # Created, body not yet started
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_finished(self) -> bool:
        return self in (self.COMPLETED, self.FAILED)


class ItemStatus(StrEnum):
    """Status of one playlist item within a job.

    Transitions only move forward: pending < running < completed|failed.
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_finished(self) -> bool:
        return self in (self.COMPLETED, self.FAILED)

    @property
    def rank(self) -> int:
        """Position in the forward-only ordering."""
        return {
            ItemStatus.PENDING: 0,
            ItemStatus.RUNNING: 1,
            ItemStatus.COMPLETED: 2,
            ItemStatus.FAILED: 2,
        }[self]


class JobKind(StrEnum):
    """Kind of work a job performs."""

    TRANSFER = "transfer"  # Copy N playlists to the destination account
    SYNC = "sync"  # Reconcile one source/destination pair


class SyncMode(StrEnum):
    """Direction of a sync job."""

    ONE_WAY = "one_way"
    TWO_WAY = "two_way"
