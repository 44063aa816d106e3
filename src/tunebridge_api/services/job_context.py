"""Per-job handle passed to job bodies."""

from dataclasses import dataclass

from tunebridge import ProgressCallback

from tunebridge_api.core.enums import ItemStatus
from tunebridge_api.services.protocols import JobBackend


@dataclass(frozen=True)
class JobContext:
    """Binds a job id to its backend.

    Job bodies report everything through this handle; it is the only
    channel from a running body back to the job record.
    """

    job_id: str
    backend: JobBackend

    def log(self, line: str) -> None:
        self.backend.append_log(self.job_id, line)

    def start_item(self, index: int, total: int | None = None) -> None:
        self.backend.update_item(
            self.job_id, index, status=ItemStatus.RUNNING, total=total
        )

    def set_total(self, index: int, total: int) -> None:
        self.backend.update_item(self.job_id, index, total=total)

    def progress(self, index: int) -> ProgressCallback:
        """Callback recording applied tracks against item ``index``."""

        def on_progress(count: int) -> None:
            self.backend.add_progress(self.job_id, index, count)

        return on_progress

    def complete_item(self, index: int) -> None:
        self.backend.update_item(self.job_id, index, status=ItemStatus.COMPLETED)

    def fail_item(self, index: int, error: str) -> None:
        self.backend.update_item(
            self.job_id, index, status=ItemStatus.FAILED, error=error
        )

    def fail_pending(self, error: str) -> int:
        return self.backend.fail_pending(self.job_id, error)


@dataclass(frozen=True)
class ResolvedTokens:
    """Access tokens of both roles, ready for provider requests."""

    source: str
    destination: str


def describe_error(exc: BaseException) -> str:
    """Human-readable message for an item error or log line."""
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__
