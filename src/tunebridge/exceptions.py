"""Custom exceptions for tunebridge.

All exceptions include an HTTP status_code attribute for easy
integration with web frameworks like FastAPI.
"""


class TuneBridgeError(Exception):
    """Base exception for tunebridge.

    Attributes:
        status_code: HTTP status code for API error responses.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthError(TuneBridgeError):
    """Missing or unrefreshable credential for a role.

    Raised before any item starts; fails the whole job.
    """

    status_code: int = 401  # Unauthorized


class SpotifyAPIError(TuneBridgeError):
    """Spotify Web API request failed.

    Attributes:
        status: HTTP status of the failed response, or None when the
            request never produced one (connection error, timeout).
    """

    status_code: int = 502  # Bad Gateway (upstream failure)

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class FetchError(SpotifyAPIError):
    """A paginated read or metadata fetch failed."""


class MutationError(SpotifyAPIError):
    """An add, remove, create or follow request failed.

    Tracks applied before the failure stay applied.
    """


class BestEffortError(TuneBridgeError):
    """A best-effort step (cover image copy) failed.

    Never propagates out of the engine; captured in a CoverCopyResult.
    """
