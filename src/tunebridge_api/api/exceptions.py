"""Custom exceptions and error handlers for the API.

All API errors use a consistent response format:
{
    "error": "error_code",
    "message": "Human-readable description",
    ...additional context fields
}
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from tunebridge import AuthError, SpotifyAPIError, TuneBridgeError


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    message: str


# -- Base Exceptions --


class ServiceError(Exception):
    """Base exception for API errors.

    Subclasses should define:
    - status_code: HTTP status code
    - error_code: Machine-readable error identifier
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# -- Job Exceptions --


class JobNotFoundError(ServiceError):
    """Raised when a job is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "job_not_found"

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")


class InvalidRequestError(ServiceError):
    """Raised for well-formed requests the engine does not support."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "invalid_request"


class NotAuthenticatedError(ServiceError):
    """Raised when a role has neither an access nor a refresh token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "not_authenticated"

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__("Not authenticated")


# -- Exception Handlers --

# Map library exceptions to error codes
_CORE_ERROR_CODES: dict[type[TuneBridgeError], str] = {
    AuthError: "not_authenticated",
    SpotifyAPIError: "spotify_api_error",
    TuneBridgeError: "internal_error",
}


def _core_error_code(exc: TuneBridgeError) -> str:
    for exc_class in type(exc).__mro__:
        if code := _CORE_ERROR_CODES.get(exc_class):
            return code
    return "internal_error"


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on the FastAPI app."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(
        request: Request, exc: ServiceError
    ) -> JSONResponse:
        """Generic handler for all ServiceError subclasses."""
        content: dict[str, str | None] = {
            "error": exc.error_code,
            "message": exc.message,
        }

        # Add context fields if present on the exception
        for field in ("job_id", "role"):
            value = getattr(exc, field, None)
            if value is not None:
                content[field] = str(value)

        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(TuneBridgeError)
    async def core_error_handler(
        request: Request, exc: TuneBridgeError
    ) -> JSONResponse:
        """Handler for library errors raised outside a job body."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": _core_error_code(exc), "message": exc.message},
        )
