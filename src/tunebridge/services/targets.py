"""Batch mutator: playlist and saved-tracks write targets.

A target is selected once per collection with `resolve_target` and carries
the mutation semantics of that collection:

- PlaylistTarget: batches of up to 100 URIs, submitted strictly in order.
- SavedTracksTarget: one id per request. The server orders saved tracks by
  the time each write lands, so additions are spaced by a fixed delay to keep
  their timestamps distinct.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import ClassVar

from tunebridge.client import SpotifyProtocol
from tunebridge.config import APIConfig
from tunebridge.models.enums import TargetKind
from tunebridge.utils.ids import (
    LIKED_SONGS_ID,
    chunked,
    is_liked_songs,
    track_ids_from_uris,
)

logger = logging.getLogger(__name__)

type ProgressCallback = Callable[[int], None]
type Sleeper = Callable[[float], Awaitable[None]]


def _noop_progress(_count: int) -> None:
    pass


@dataclass(frozen=True)
class PlaylistTarget:
    """A regular playlist: batchable, order follows request order."""

    kind: ClassVar[TargetKind] = TargetKind.PLAYLIST

    playlist_id: str
    batch_size: int = 100

    def ordered_for_write(self, uris: Sequence[str]) -> list[str]:
        """Appends land in request order, so keep the input order."""
        return list(uris)

    async def add_tracks(
        self,
        client: SpotifyProtocol,
        token: str,
        uris: Sequence[str],
        on_progress: ProgressCallback = _noop_progress,
    ) -> None:
        """Append URIs in sequential batches.

        Raises:
            MutationError: On the first failed batch; earlier batches stay applied.
        """
        for batch in chunked(uris, self.batch_size):
            await client.add_to_playlist(token, self.playlist_id, batch)
            on_progress(len(batch))

    async def remove_tracks(
        self,
        client: SpotifyProtocol,
        token: str,
        uris: Sequence[str],
        on_progress: ProgressCallback = _noop_progress,
    ) -> None:
        """Remove URIs in sequential batches.

        Raises:
            MutationError: On the first failed batch; earlier batches stay applied.
        """
        for batch in chunked(uris, self.batch_size):
            await client.remove_from_playlist(token, self.playlist_id, batch)
            on_progress(len(batch))


@dataclass(frozen=True)
class SavedTracksTarget:
    """The saved-tracks ("Liked Songs") collection.

    Writes are issued one id at a time. Non-track URIs (local files,
    episodes) cannot be saved and are dropped.
    """

    kind: ClassVar[TargetKind] = TargetKind.SAVED_TRACKS

    write_delay: float = 0.25
    sleep: Sleeper = field(default=asyncio.sleep, compare=False, repr=False)

    @property
    def playlist_id(self) -> str:
        return LIKED_SONGS_ID

    def ordered_for_write(self, uris: Sequence[str]) -> list[str]:
        """Reverse the input: the collection lists the newest write first."""
        return list(reversed(uris))

    async def add_tracks(
        self,
        client: SpotifyProtocol,
        token: str,
        uris: Sequence[str],
        on_progress: ProgressCallback = _noop_progress,
    ) -> None:
        """Save tracks one by one, pausing ``write_delay`` between writes.

        Raises:
            MutationError: On the first failed write; earlier writes stay applied.
        """
        for index, track_id in enumerate(track_ids_from_uris(uris)):
            if index and self.write_delay > 0:
                await self.sleep(self.write_delay)
            await client.save_track(token, track_id)
            on_progress(1)

    async def remove_tracks(
        self,
        client: SpotifyProtocol,
        token: str,
        uris: Sequence[str],
        on_progress: ProgressCallback = _noop_progress,
    ) -> None:
        """Unsave tracks one by one. No delay: order is irrelevant once removed.

        Raises:
            MutationError: On the first failed write; earlier writes stay applied.
        """
        for track_id in track_ids_from_uris(uris):
            await client.unsave_track(token, track_id)
            on_progress(1)


type WriteTarget = PlaylistTarget | SavedTracksTarget


def resolve_target(playlist_id: str, config: APIConfig | None = None) -> WriteTarget:
    """Select the write target for a playlist id.

    Args:
        playlist_id: Playlist id, or the liked-songs sentinel.
        config: Optional API configuration providing batch size and delay.

    Returns:
        SavedTracksTarget for the sentinel, PlaylistTarget otherwise.
    """
    config = config or APIConfig()
    if is_liked_songs(playlist_id):
        return SavedTracksTarget(write_delay=config.saved_tracks_write_delay)
    return PlaylistTarget(playlist_id=playlist_id, batch_size=config.batch_size)
