"""Paginated track reader."""

import logging

from tunebridge.client import SpotifyProtocol
from tunebridge.utils.ids import is_liked_songs

logger = logging.getLogger(__name__)


class TrackReader:
    """Reads the complete ordered list of track URIs of a collection.

    Follows the ``next`` cursor page by page until the server returns none.
    Server order and duplicates are preserved; deduplication is left to the
    reconciler.
    """

    def __init__(self, client: SpotifyProtocol) -> None:
        self._client = client

    async def read_all_tracks(self, token: str, playlist_id: str) -> list[str]:
        """Read every track URI of a playlist or of the saved-tracks collection.

        All-or-nothing: a failed page discards what was already read.

        Args:
            token: Bearer token of the account owning or seeing the playlist.
            playlist_id: Playlist id, or the liked-songs sentinel.

        Returns:
            Track URIs in server order.

        Raises:
            FetchError: If any page request fails.
        """
        if is_liked_songs(playlist_id):
            next_url: str | None = self._client.saved_tracks_url()
        else:
            next_url = self._client.playlist_tracks_url(playlist_id)

        uris: list[str] = []
        pages = 0
        while next_url:
            page = await self._client.get_track_page(token, next_url)
            uris.extend(page.uris)
            next_url = page.next
            pages += 1

        logger.debug(
            "Read %d tracks from %s in %d page(s)", len(uris), playlist_id, pages
        )
        return uris
