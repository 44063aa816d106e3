"""Spotify Web API client wrapper."""

import asyncio
import base64
import logging
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from tunebridge.config import APIConfig
from tunebridge.exceptions import FetchError, MutationError, SpotifyAPIError
from tunebridge.models.spotify import (
    CreatedPlaylist,
    CurrentUser,
    PlaylistDetails,
    TrackPage,
)

logger = logging.getLogger(__name__)

# Fields requested when reading playlist metadata
_PLAYLIST_FIELDS = "id,name,description,images(height,width,url),owner(id,display_name)"

# Responses worth retrying: rate limiting and upstream hiccups
_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})

# A POST may have been applied even when its reply was lost or failed
_NON_IDEMPOTENT_METHODS = frozenset({"POST"})

# Transport errors raised before the request reached the server
_UNSENT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)


class SpotifyProtocol(Protocol):
    """Protocol for Spotify Web API clients.

    This protocol enables dependency injection and testing.
    Every call takes the bearer token explicitly because a single job talks
    to two accounts (source and destination).
    """

    def playlist_tracks_url(self, playlist_id: str) -> str: ...

    def saved_tracks_url(self) -> str: ...

    async def get_current_user(self, token: str) -> CurrentUser: ...

    async def get_playlist(self, token: str, playlist_id: str) -> PlaylistDetails: ...

    async def get_track_page(self, token: str, url: str) -> TrackPage: ...

    async def create_playlist(
        self, token: str, name: str, description: str | None = None
    ) -> CreatedPlaylist: ...

    async def follow_playlist(self, token: str, playlist_id: str) -> None: ...

    async def add_to_playlist(
        self, token: str, playlist_id: str, uris: list[str]
    ) -> None: ...

    async def remove_from_playlist(
        self, token: str, playlist_id: str, uris: list[str]
    ) -> None: ...

    async def save_track(self, token: str, track_id: str) -> None: ...

    async def unsave_track(self, token: str, track_id: str) -> None: ...

    async def fetch_image(self, url: str) -> tuple[bytes, str]: ...

    async def upload_cover(self, token: str, playlist_id: str, jpeg: bytes) -> None: ...


class SpotifyClient:
    """Production Spotify Web API client.

    Wraps an httpx.AsyncClient with bearer authentication, bounded retries
    for rate limiting (429) and server errors, and consistent error mapping:
    reads raise FetchError, writes raise MutationError.

    Implements SpotifyProtocol for type safety.
    """

    def __init__(
        self,
        http: httpx.AsyncClient | None = None,
        config: APIConfig | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            http: Optional httpx client. Creates one if not provided.
            config: Optional API configuration. Uses defaults if not provided.
        """
        self._config = config or APIConfig()
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=self._config.timeout)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "SpotifyClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    # -------------------------------------------------------------------------
    # URLs
    # -------------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._config.api_url}{path}"

    def _playlist_path(self, playlist_id: str) -> str:
        return f"/playlists/{quote(playlist_id, safe='')}"

    def playlist_tracks_url(self, playlist_id: str) -> str:
        """First page URL of a playlist's track listing."""
        path = f"{self._playlist_path(playlist_id)}/tracks"
        return f"{self._url(path)}?limit={self._config.playlist_page_size}"

    def saved_tracks_url(self) -> str:
        """First page URL of the user's saved tracks."""
        return f"{self._url('/me/tracks')}?limit={self._config.saved_tracks_page_size}"

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_current_user(self, token: str) -> CurrentUser:
        """Fetch the authenticated user.

        Raises:
            FetchError: If the request fails.
        """
        response = await self._request(
            "GET",
            self._url("/me"),
            token,
            error=FetchError,
            message="Failed to fetch Spotify user",
        )
        return CurrentUser.model_validate(response.json())

    async def get_playlist(self, token: str, playlist_id: str) -> PlaylistDetails:
        """Fetch playlist metadata (name, description, images, owner).

        Raises:
            FetchError: If the request fails.
        """
        logger.debug("Fetching playlist details: %s", playlist_id)
        response = await self._request(
            "GET",
            self._url(self._playlist_path(playlist_id)),
            token,
            params={"fields": _PLAYLIST_FIELDS},
            error=FetchError,
            message="Failed to get playlist details",
        )
        return PlaylistDetails.model_validate(response.json())

    async def get_track_page(self, token: str, url: str) -> TrackPage:
        """Fetch one page of a track listing by absolute URL.

        Raises:
            FetchError: If the request fails.
        """
        response = await self._request(
            "GET",
            url,
            token,
            error=FetchError,
            message="Failed to fetch playlist tracks",
        )
        return TrackPage.model_validate(response.json())

    async def fetch_image(self, url: str) -> tuple[bytes, str]:
        """Download an image without authentication.

        Returns:
            Tuple of (image bytes, content type).

        Raises:
            FetchError: If the request fails or the URL is malformed.
        """
        try:
            response = await self._request(
                "GET", url, None, error=FetchError, message="Failed to fetch image"
            )
        except (httpx.InvalidURL, ValueError) as e:
            raise FetchError(f"Invalid image URL {url!r}: {e}") from e
        return response.content, response.headers.get("content-type", "")

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_playlist(
        self, token: str, name: str, description: str | None = None
    ) -> CreatedPlaylist:
        """Create a playlist owned by the token's user.

        Raises:
            MutationError: If the request fails.
        """
        response = await self._request(
            "POST",
            self._url("/me/playlists"),
            token,
            json={"name": name, "description": description or ""},
            error=MutationError,
            message="Failed to create destination playlist",
        )
        return CreatedPlaylist.model_validate(response.json())

    async def follow_playlist(self, token: str, playlist_id: str) -> None:
        """Follow (add to library) a playlist owned by someone else.

        Raises:
            MutationError: If the request fails.
        """
        await self._request(
            "PUT",
            self._url(f"{self._playlist_path(playlist_id)}/followers"),
            token,
            json={"public": False},
            error=MutationError,
            message="Failed to follow playlist",
        )

    async def add_to_playlist(
        self, token: str, playlist_id: str, uris: list[str]
    ) -> None:
        """Append track URIs to a playlist in one request.

        Raises:
            MutationError: If the request fails.
        """
        await self._request(
            "POST",
            self._url(f"{self._playlist_path(playlist_id)}/tracks"),
            token,
            json={"uris": uris},
            error=MutationError,
            message="Failed to add tracks",
        )

    async def remove_from_playlist(
        self, token: str, playlist_id: str, uris: list[str]
    ) -> None:
        """Remove all occurrences of track URIs from a playlist in one request.

        Raises:
            MutationError: If the request fails.
        """
        await self._request(
            "DELETE",
            self._url(f"{self._playlist_path(playlist_id)}/tracks"),
            token,
            json={"tracks": [{"uri": uri} for uri in uris]},
            error=MutationError,
            message="Failed to remove tracks",
        )

    async def save_track(self, token: str, track_id: str) -> None:
        """Add a single track to the user's saved tracks.

        Raises:
            MutationError: If the request fails.
        """
        await self._request(
            "PUT",
            self._url("/me/tracks"),
            token,
            json={"ids": [track_id]},
            error=MutationError,
            message="Failed to save track to library",
        )

    async def unsave_track(self, token: str, track_id: str) -> None:
        """Remove a single track from the user's saved tracks.

        Raises:
            MutationError: If the request fails.
        """
        await self._request(
            "DELETE",
            self._url("/me/tracks"),
            token,
            params={"ids": track_id},
            error=MutationError,
            message="Failed to remove track from library",
        )

    async def upload_cover(self, token: str, playlist_id: str, jpeg: bytes) -> None:
        """Replace a playlist's cover with a JPEG image.

        The API expects the raw base64 text as request body.

        Raises:
            MutationError: If the request fails.
        """
        await self._request(
            "PUT",
            self._url(f"{self._playlist_path(playlist_id)}/images"),
            token,
            content=base64.b64encode(jpeg),
            headers={"Content-Type": "image/jpeg"},
            error=MutationError,
            message="Failed to upload playlist cover",
        )

    # -------------------------------------------------------------------------
    # Private: transport
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        token: str | None,
        *,
        error: type[SpotifyAPIError],
        message: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request, retrying rate-limited and transient failures.

        POST writes are not idempotent: they are retried only on 429 or when
        the connection was never established.

        Args:
            method: HTTP method.
            url: Absolute URL.
            token: Bearer token, or None for unauthenticated requests.
            error: Exception class raised on failure.
            message: Message prefix for the raised exception.

        Returns:
            The successful (2xx) response.

        Raises:
            SpotifyAPIError: Subclass given by ``error`` once retries are exhausted
                or on a non-retryable response.
        """
        request_headers = dict(headers or {})
        if token:
            request_headers["Authorization"] = f"Bearer {token}"

        idempotent = method not in _NON_IDEMPOTENT_METHODS
        attempts = self._config.max_retries + 1
        for attempt in range(attempts):
            try:
                response = await self._http.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    content=content,
                    headers=request_headers,
                )
            except httpx.TransportError as e:
                retryable = idempotent or isinstance(e, _UNSENT_ERRORS)
                if retryable and attempt < attempts - 1:
                    delay = self._backoff(attempt)
                    logger.warning(
                        "%s %s transport error (attempt %d/%d), retrying in %.1fs: %s",
                        method,
                        url,
                        attempt + 1,
                        attempts,
                        delay,
                        e,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise error(f"{message}: {e}") from e

            if response.is_success:
                return response

            if self._is_retryable(response, idempotent) and attempt < attempts - 1:
                delay = self._retry_delay(response, attempt)
                logger.warning(
                    "%s %s returned %d (attempt %d/%d), retrying in %.1fs",
                    method,
                    url,
                    response.status_code,
                    attempt + 1,
                    attempts,
                    delay,
                )
                await asyncio.sleep(delay)
                continue

            logger.debug(
                "%s %s failed with %d: %s",
                method,
                url,
                response.status_code,
                response.text[:200],
            )
            raise error(
                f"{message} (HTTP {response.status_code})",
                status=response.status_code,
            )

        # Unreachable: the final attempt either returns or raises
        raise error(message)

    def _backoff(self, attempt: int) -> float:
        return self._config.retry_base_delay * (2**attempt)

    @staticmethod
    def _is_retryable(response: httpx.Response, idempotent: bool) -> bool:
        """Rate limits are always retried; server errors only when idempotent."""
        if response.status_code == 429:
            return True
        return idempotent and response.status_code in _RETRYABLE_STATUS

    def _retry_delay(self, response: httpx.Response, attempt: int) -> float:
        """Delay before retrying, honoring Retry-After on 429 responses.

        Capped at ``max_retry_after`` so a job never stalls silently.
        """
        delay = self._backoff(attempt)
        retry_after = response.headers.get("retry-after")
        if retry_after:
            try:
                delay = max(delay, float(retry_after))
            except ValueError:
                pass  # HTTP-date form is not used by Spotify
        if delay > self._config.max_retry_after:
            logger.warning(
                "Retry delay of %.0fs exceeds limit, waiting %.0fs instead",
                delay,
                self._config.max_retry_after,
            )
            delay = self._config.max_retry_after
        return delay
