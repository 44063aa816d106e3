"""Best-effort playlist cover copy."""

import logging

from tunebridge.client import SpotifyProtocol
from tunebridge.exceptions import BestEffortError, SpotifyAPIError
from tunebridge.models.results import CoverCopyResult

logger = logging.getLogger(__name__)

_JPEG_CONTENT_TYPES = ("jpeg", "jpg")


class CoverCopier:
    """Copies a source playlist's artwork onto a destination playlist.

    Never raises: every outcome is reported as a CoverCopyResult so callers
    can log or assert it without the copy ever failing an item.
    """

    def __init__(self, client: SpotifyProtocol) -> None:
        self._client = client

    async def copy(
        self, token: str, playlist_id: str, image_url: str | None
    ) -> CoverCopyResult:
        """Upload the image at ``image_url`` as the cover of ``playlist_id``.

        Args:
            token: Bearer token of the destination account.
            playlist_id: Destination playlist id.
            image_url: Source artwork URL, if the source has one.

        Returns:
            COPIED on success, SKIPPED without an image or for non-JPEG
            artwork, FAILED when the download or upload errors.
        """
        if not image_url:
            return CoverCopyResult.skipped("no cover image")

        try:
            jpeg = await self._download_jpeg(image_url)
        except BestEffortError as e:
            logger.debug("Skipping cover for %s: %s", playlist_id, e.message)
            return CoverCopyResult.skipped(e.message)
        except SpotifyAPIError as e:
            logger.debug("Cover download failed for %s: %s", playlist_id, e.message)
            return CoverCopyResult.failed(e.message)

        try:
            await self._client.upload_cover(token, playlist_id, jpeg)
        except SpotifyAPIError as e:
            logger.debug("Cover upload failed for %s: %s", playlist_id, e.message)
            return CoverCopyResult.failed(e.message)

        return CoverCopyResult.copied()

    async def _download_jpeg(self, image_url: str) -> bytes:
        """Fetch artwork bytes, rejecting anything that is not a JPEG.

        Raises:
            BestEffortError: If the content type is not JPEG.
            FetchError: If the download fails.
        """
        data, content_type = await self._client.fetch_image(image_url)
        if not any(kind in content_type.lower() for kind in _JPEG_CONTENT_TYPES):
            kind = content_type or "unknown"
            raise BestEffortError(f"unsupported cover type: {kind}")
        return data
