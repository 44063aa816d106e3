"""Job execution orchestration service."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Protocol

from tunebridge import APIConfig, AuthError, CredentialProvider, SpotifyProtocol

from tunebridge_api.core.enums import JobKind, SyncMode
from tunebridge_api.core.models import Credentials, Job, PlaylistProgress, PlaylistRef
from tunebridge_api.core.types import ClientFactory
from tunebridge_api.services.job_context import (
    JobContext,
    ResolvedTokens,
    describe_error,
)
from tunebridge_api.services.protocols import JobBackend
from tunebridge_api.services.sync import SyncJob
from tunebridge_api.services.transfer import TransferJob

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Not authenticated"


class JobBody(Protocol):
    """The work a job performs once its tokens are resolved."""

    kind: JobKind

    def items(self) -> list[PlaylistProgress]: ...

    async def run(
        self, ctx: JobContext, client: SpotifyProtocol, tokens: ResolvedTokens
    ) -> None: ...


class JobExecutor:
    """Orchestrates job execution lifecycle.

    Each job body runs as a detached asyncio task. The creation call returns
    the freshly created snapshot right away; the body reports back only
    through the job store.

    Key Responsibilities:
        - Background task lifecycle (creation, tracking, cleanup)
        - Token resolution for both roles before any provider request
        - One Spotify client per job, closed when the body ends
        - Outer error boundary: a job never stays running

    Architecture Notes:
        - Uses JobBackend protocol for persistence (ISP compliance)
        - Tasks are tracked in a set to prevent garbage collection
        - No cancellation and no timeout beyond the HTTP client's own
    """

    def __init__(
        self,
        job_store: JobBackend,
        credential_provider: CredentialProvider,
        client_factory: ClientFactory,
        config: APIConfig | None = None,
    ) -> None:
        """Initialize the job executor.

        Args:
            job_store: Store for job records (protocol-based for testability).
            credential_provider: Resolves access tokens from the request bundle.
            client_factory: Returns a Spotify client usable as an async context
                manager; called once per job.
            config: API configuration passed to job bodies.
        """
        self._job_store = job_store
        self._credential_provider = credential_provider
        self._client_factory = client_factory
        self._config = config or APIConfig()

        # Track background tasks to prevent GC during execution
        self._background_tasks: set[asyncio.Task[Any]] = set()

    @property
    def active_count(self) -> int:
        """Number of job bodies still running."""
        return len(self._background_tasks)

    def create_and_start_transfer(
        self, playlists: Sequence[PlaylistRef], credentials: Credentials
    ) -> Job:
        """Create a transfer job and start it in the background.

        Args:
            playlists: Source playlists, one item each.
            credentials: Bearer bundle for both accounts.

        Returns:
            Snapshot of the queued job.
        """
        return self.submit(TransferJob(playlists, self._config), credentials)

    def create_and_start_sync(
        self,
        source: PlaylistRef,
        destination: PlaylistRef,
        mode: SyncMode,
        credentials: Credentials,
        *,
        remove_missing: bool = False,
    ) -> Job:
        """Create a sync job and start it in the background.

        Returns:
            Snapshot of the queued job.
        """
        body = SyncJob(source, destination, mode, remove_missing, self._config)
        return self.submit(body, credentials)

    def submit(self, body: JobBody, credentials: Credentials) -> Job:
        """Register a job for ``body`` and spawn it."""
        job = self._job_store.create(body.kind, body.items())
        self.start_job(job.id, body, credentials)
        return job

    def start_job(self, job_id: str, body: JobBody, credentials: Credentials) -> None:
        """Start a job body as a background task.

        Args:
            job_id: ID of a queued job.
            body: The work to run.
            credentials: Bearer bundle resolved inside the task.
        """
        task = asyncio.create_task(
            self._run_job(job_id, body, credentials),
            name=f"job-{job_id[:8]}",  # Helpful for debugging
        )
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def wait_all(self) -> None:
        """Wait until every running job body has finished."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks))

    async def _run_job(
        self, job_id: str, body: JobBody, credentials: Credentials
    ) -> None:
        """Background task that runs one job body to a terminal status."""
        ctx = JobContext(job_id, self._job_store)
        self._job_store.start(job_id)

        try:
            tokens = await self._resolve_tokens(credentials)
            async with self._client_factory() as client:
                await body.run(ctx, client, tokens)

        except AuthError as e:
            logger.warning("Job %s not authenticated: %s", job_id[:8], e.message)
            ctx.fail_pending(NOT_AUTHENTICATED)
            ctx.log("Authentication missing. Please sign in to both accounts.")

        except Exception as e:
            logger.exception("Job %s failed with error: %s", job_id[:8], e)
            error = describe_error(e)
            ctx.fail_pending(error)
            ctx.log(error)

        finally:
            self._job_store.finish(job_id)

    async def _resolve_tokens(self, credentials: Credentials) -> ResolvedTokens:
        """Resolve access tokens for both roles.

        Raises:
            AuthError: If either role has no usable token.
        """
        source = await self._credential_provider.ensure_token(
            credentials.source_access_token, credentials.source_refresh_token
        )
        destination = await self._credential_provider.ensure_token(
            credentials.dest_access_token, credentials.dest_refresh_token
        )
        if not source or not destination:
            raise AuthError(NOT_AUTHENTICATED)
        return ResolvedTokens(source=source, destination=destination)
