"""FastAPI dependency injection factories.

This module provides type-safe dependency injection for FastAPI routes.
Dependencies are defined as Annotated types for clean, reusable injection.

Usage in routes:
    from tunebridge_api.api.deps import JobStoreDep, CookieCredentialsDep

    @router.get("/jobs")
    async def list_jobs(job_store: JobStoreDep) -> ...:
        ...
"""

from typing import Annotated

from fastapi import Cookie, Depends

from tunebridge_api.api.container import Services, get_services
from tunebridge_api.api.exceptions import NotAuthenticatedError
from tunebridge_api.core.models import Credentials
from tunebridge_api.services.job_executor import JobExecutor
from tunebridge_api.services.job_store import JobStore

# -- Service dependencies (request-scoped via app.state) --

ServicesDep = Annotated[Services, Depends(get_services)]


def _get_job_store(services: ServicesDep) -> JobStore:
    """Get job store from services container."""
    return services.job_store


def _get_job_executor(services: ServicesDep) -> JobExecutor:
    """Get job executor from services container."""
    return services.job_executor


JobStoreDep = Annotated[JobStore, Depends(_get_job_store)]
JobExecutorDep = Annotated[JobExecutor, Depends(_get_job_executor)]

# -- Credentials --


def _get_cookie_credentials(
    spotify_source_access_token: Annotated[str | None, Cookie()] = None,
    spotify_access_token: Annotated[str | None, Cookie()] = None,
    spotify_source_refresh_token: Annotated[str | None, Cookie()] = None,
    spotify_refresh_token: Annotated[str | None, Cookie()] = None,
    spotify_destination_access_token: Annotated[str | None, Cookie()] = None,
    spotify_destination_refresh_token: Annotated[str | None, Cookie()] = None,
) -> Credentials:
    """Read the credential bundle from the OAuth session cookies.

    The source role falls back to the single-account cookie names.
    """
    return Credentials(
        source_access_token=spotify_source_access_token or spotify_access_token,
        source_refresh_token=spotify_source_refresh_token or spotify_refresh_token,
        dest_access_token=spotify_destination_access_token,
        dest_refresh_token=spotify_destination_refresh_token,
    )


CookieCredentialsDep = Annotated[Credentials, Depends(_get_cookie_credentials)]


def require_credentials(
    explicit: Credentials | None, cookies: Credentials
) -> Credentials:
    """Pick the request's credential bundle and check both roles are present.

    Args:
        explicit: Bundle from the request body, if the client sent one.
        cookies: Bundle read from the session cookies.

    Raises:
        NotAuthenticatedError: If a role has neither access nor refresh token.
    """
    credentials = explicit or cookies
    if not credentials.has_source:
        raise NotAuthenticatedError("source")
    if not credentials.has_destination:
        raise NotAuthenticatedError("destination")
    return credentials
