"""Service protocols for dependency injection."""

from collections.abc import Sequence
from typing import Protocol

from tunebridge_api.core.enums import ItemStatus, JobKind
from tunebridge_api.core.models import Job, PlaylistProgress


class JobBackend(Protocol):
    """Narrow interface for job creation and mutation.

    This protocol defines what JobExecutor and the job bodies need from
    the store, so a durable backend can replace the in-memory one.

    All methods are synchronous as they only operate on in-memory data.
    """

    def create(self, kind: JobKind, items: Sequence[PlaylistProgress]) -> Job:
        """Create a queued job and return its snapshot."""
        ...

    def get(self, job_id: str) -> Job | None: ...

    def start(self, job_id: str) -> bool: ...

    def append_log(self, job_id: str, line: str) -> None: ...

    def update_item(
        self,
        job_id: str,
        index: int,
        *,
        status: ItemStatus | None = None,
        total: int | None = None,
        error: str | None = None,
    ) -> bool:
        """Update one item; ignored for finished items or backwards moves."""
        ...

    def add_progress(self, job_id: str, index: int, count: int) -> bool: ...

    def fail_pending(self, job_id: str, error: str) -> int:
        """Fail every non-finished item with a shared error."""
        ...

    def finish(self, job_id: str) -> Job | None:
        """Derive and set the terminal job status."""
        ...
