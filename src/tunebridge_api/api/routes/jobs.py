"""Jobs API endpoints.

Handles job creation (transfer and sync) and status polling. Jobs run in
the background; clients poll the status endpoint until the job reaches a
terminal status.
"""

from typing import Annotated

from fastapi import APIRouter, Query, Response, status
from tunebridge import is_liked_songs

from tunebridge_api.api.deps import (
    CookieCredentialsDep,
    JobExecutorDep,
    JobStoreDep,
    require_credentials,
)
from tunebridge_api.api.exceptions import (
    ErrorResponse,
    InvalidRequestError,
    JobNotFoundError,
)
from tunebridge_api.core.models import Job
from tunebridge_api.schemas.jobs import (
    CreateSyncRequest,
    CreateTransferRequest,
    JobCreatedResponse,
    JobsResponse,
)
from tunebridge_api.services.job_store import JobStore

router = APIRouter(tags=["jobs"])

# Lets the UI resume polling after a page reload
ACTIVE_JOB_COOKIE = "active_transfer_job_id"
ACTIVE_JOB_COOKIE_MAX_AGE = 60 * 60


def _get_job_or_raise(job_store: JobStore, job_id: str) -> Job:
    """Get job by ID or raise JobNotFoundError."""
    if not (job := job_store.get(job_id)):
        raise JobNotFoundError(job_id)
    return job


def _created(response: Response, job: Job) -> JobCreatedResponse:
    response.set_cookie(
        ACTIVE_JOB_COOKIE,
        job.id,
        max_age=ACTIVE_JOB_COOKIE_MAX_AGE,
        path="/",
        httponly=False,
    )
    return JobCreatedResponse(id=job.id, state=job)


@router.post(
    "/transfers",
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)
async def create_transfer(
    request: CreateTransferRequest,
    response: Response,
    cookies: CookieCredentialsDep,
    job_executor: JobExecutorDep,
) -> JobCreatedResponse:
    """Copy playlists into the destination account.

    Returns the job id and its initial (queued) snapshot immediately.
    """
    credentials = require_credentials(request.auth, cookies)
    job = job_executor.create_and_start_transfer(request.playlists, credentials)
    return _created(response, job)


@router.post(
    "/syncs",
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported playlist"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_sync(
    request: CreateSyncRequest,
    response: Response,
    cookies: CookieCredentialsDep,
    job_executor: JobExecutorDep,
) -> JobCreatedResponse:
    """Reconcile a source playlist with a destination playlist.

    Liked Songs cannot be synced on either side.
    """
    if is_liked_songs(request.source.id) or is_liked_songs(request.destination.id):
        raise InvalidRequestError("Syncing Liked Songs is not supported")

    credentials = require_credentials(request.auth, cookies)
    job = job_executor.create_and_start_sync(
        request.source,
        request.destination,
        request.mode,
        credentials,
        remove_missing=request.remove_missing,
    )
    return _created(response, job)


@router.get("/jobs")
async def list_jobs(job_store: JobStoreDep) -> JobsResponse:
    """List all jobs (oldest first)."""
    return JobsResponse(jobs=job_store.get_all())


@router.get(
    "/jobs/status",
    responses={404: {"model": ErrorResponse, "description": "Job not found"}},
)
async def get_job_status(
    job_id: Annotated[str, Query(alias="id", min_length=1)],
    job_store: JobStoreDep,
) -> Job:
    """Get a job by query parameter, the path polling clients already use."""
    return _get_job_or_raise(job_store, job_id)


@router.get(
    "/jobs/{job_id}",
    responses={404: {"model": ErrorResponse, "description": "Job not found"}},
)
async def get_job(job_id: str, job_store: JobStoreDep) -> Job:
    """Get the full record of a job."""
    return _get_job_or_raise(job_store, job_id)
