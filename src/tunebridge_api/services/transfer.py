"""Transfer job body: copy N playlists into the destination account."""

import logging
from collections.abc import Sequence

from tunebridge import (
    LIKED_SONGS_ID,
    LIKED_SONGS_NAME,
    APIConfig,
    CoverCopier,
    CoverCopyStatus,
    MutationError,
    SpotifyProtocol,
    TrackReader,
    is_liked_songs,
    resolve_target,
)
from tunebridge.models.spotify import PlaylistDetails

from tunebridge_api.core.enums import JobKind
from tunebridge_api.core.models import PlaylistProgress, PlaylistRef
from tunebridge_api.services.job_context import (
    JobContext,
    ResolvedTokens,
    describe_error,
)

logger = logging.getLogger(__name__)


class TransferJob:
    """Copies each selected playlist, one item per playlist, in order.

    Failures are isolated per item: an error marks only the current item
    failed and the transfer moves on to the next playlist.

    Playlists owned by someone other than the source user are followed at
    the destination instead of copied; a failed follow falls back to a copy.
    """

    kind = JobKind.TRANSFER

    def __init__(
        self, playlists: Sequence[PlaylistRef], config: APIConfig | None = None
    ) -> None:
        self._playlists = list(playlists)
        self._config = config or APIConfig()

    def items(self) -> list[PlaylistProgress]:
        return [
            PlaylistProgress(playlist_id=ref.id, playlist_name=ref.name)
            for ref in self._playlists
        ]

    async def run(
        self, ctx: JobContext, client: SpotifyProtocol, tokens: ResolvedTokens
    ) -> None:
        """Transfer every playlist.

        Raises:
            FetchError: If either account cannot be read before the first
                item starts. Errors after that are recorded on the item.
        """
        await client.get_current_user(tokens.destination)
        source_user = await client.get_current_user(tokens.source)

        for index, ref in enumerate(self._playlists):
            try:
                await self._transfer_one(
                    ctx, client, tokens, index, ref, source_user.id
                )
            except Exception as e:
                error = describe_error(e)
                logger.warning("Transfer of %s failed: %s", ref.id, error)
                ctx.fail_item(index, error)
                ctx.log(f"Failed {ref.name}: {error}")

    async def _transfer_one(
        self,
        ctx: JobContext,
        client: SpotifyProtocol,
        tokens: ResolvedTokens,
        index: int,
        ref: PlaylistRef,
        source_user_id: str,
    ) -> None:
        ctx.start_item(index)
        ctx.log(f"Reading playlist: {ref.name}")
        details = await self._get_details(client, tokens.source, ref.id)

        if details.owner_id and details.owner_id != source_user_id:
            if await self._follow(ctx, client, tokens.destination, details):
                ctx.complete_item(index)
                return

        uris = await TrackReader(client).read_all_tracks(tokens.source, ref.id)
        ctx.set_total(index, len(uris))
        ctx.log(f"Found {len(uris)} tracks")

        ctx.log(f"Creating destination playlist: {details.name}")
        created = await client.create_playlist(
            tokens.destination, details.name, details.description
        )

        cover = await CoverCopier(client).copy(
            tokens.destination, created.id, details.cover_url
        )
        if cover.status == CoverCopyStatus.FAILED:
            ctx.log(f"Cover image not copied: {cover.reason}")

        ctx.log("Adding tracks...")
        target = resolve_target(created.id, self._config)
        await target.add_tracks(
            client,
            tokens.destination,
            target.ordered_for_write(uris),
            ctx.progress(index),
        )

        ctx.complete_item(index)
        ctx.log(f"Completed: {details.name}")

    async def _get_details(
        self, client: SpotifyProtocol, token: str, playlist_id: str
    ) -> PlaylistDetails:
        # Saved tracks have no playlist resource behind them
        if is_liked_songs(playlist_id):
            return PlaylistDetails(id=LIKED_SONGS_ID, name=LIKED_SONGS_NAME)
        return await client.get_playlist(token, playlist_id)

    async def _follow(
        self,
        ctx: JobContext,
        client: SpotifyProtocol,
        token: str,
        details: PlaylistDetails,
    ) -> bool:
        """Follow a foreign playlist at the destination.

        Returns:
            True if followed, False if the caller should copy it instead.
        """
        ctx.log(f"Adding playlist to destination library: {details.name}")
        try:
            await client.follow_playlist(token, details.id)
        except MutationError as e:
            reason = f"status {e.status}" if e.status else e.message
            ctx.log(f"Follow failed ({reason}). Creating a copy instead...")
            return False
        ctx.log(f"Added to library: {details.name}")
        return True
