"""Sync job body: reconcile one source/destination pair."""

import logging

from tunebridge import (
    APIConfig,
    Reconciliation,
    SpotifyProtocol,
    TrackReader,
    reconcile,
    resolve_target,
)

from tunebridge_api.core.enums import JobKind, SyncMode
from tunebridge_api.core.models import PlaylistProgress, PlaylistRef
from tunebridge_api.services.job_context import (
    JobContext,
    ResolvedTokens,
    describe_error,
)

logger = logging.getLogger(__name__)


class SyncJob:
    """Brings a destination (and, for two-way, the source) up to date.

    Both collections are read once up front. The additions and removals are
    fixed by that single snapshot and never re-diffed while writing, so
    changes made elsewhere during a long sync go unnoticed.

    Items:
        - one-way: one item keyed by the destination id
        - two-way: ``to:<destinationId>`` then ``to:<sourceId>``

    Any error fails every unfinished item and therefore the job.
    """

    kind = JobKind.SYNC

    def __init__(
        self,
        source: PlaylistRef,
        destination: PlaylistRef,
        mode: SyncMode,
        remove_missing: bool = False,
        config: APIConfig | None = None,
    ) -> None:
        self._source = source
        self._destination = destination
        self._mode = mode
        self._remove_missing = remove_missing
        self._config = config or APIConfig()

    def items(self) -> list[PlaylistProgress]:
        if self._mode == SyncMode.ONE_WAY:
            return [
                PlaylistProgress(
                    playlist_id=self._destination.id,
                    playlist_name=self._destination.name,
                )
            ]
        return [
            PlaylistProgress(
                playlist_id=f"to:{self._destination.id}",
                playlist_name=self._destination.name,
            ),
            PlaylistProgress(
                playlist_id=f"to:{self._source.id}",
                playlist_name=self._source.name,
            ),
        ]

    async def run(
        self, ctx: JobContext, client: SpotifyProtocol, tokens: ResolvedTokens
    ) -> None:
        try:
            diff = await self._read_and_reconcile(ctx, client, tokens)
            if self._mode == SyncMode.ONE_WAY:
                await self._one_way(ctx, client, tokens, diff)
            else:
                await self._two_way(ctx, client, tokens, diff)
        except Exception as e:
            error = describe_error(e)
            logger.warning("Sync %s failed: %s", ctx.job_id[:8], error)
            ctx.log(f"Sync failed: {error}")
            ctx.fail_pending(error)

    async def _read_and_reconcile(
        self, ctx: JobContext, client: SpotifyProtocol, tokens: ResolvedTokens
    ) -> Reconciliation:
        reader = TrackReader(client)

        ctx.log(f"Fetching source tracks: {self._source.name}")
        source_uris = await reader.read_all_tracks(tokens.source, self._source.id)
        ctx.log(f"Source has {len(source_uris)} tracks")

        ctx.log(f"Fetching destination tracks: {self._destination.name}")
        dest_uris = await reader.read_all_tracks(
            tokens.destination, self._destination.id
        )
        ctx.log(f"Destination has {len(dest_uris)} tracks")

        return reconcile(source_uris, dest_uris)

    async def _one_way(
        self,
        ctx: JobContext,
        client: SpotifyProtocol,
        tokens: ResolvedTokens,
        diff: Reconciliation,
    ) -> None:
        target = resolve_target(self._destination.id, self._config)

        ctx.start_item(0, total=len(diff.to_dest))
        ctx.log(
            f"One-way sync: adding {len(diff.to_dest)} missing tracks to destination"
        )
        await target.add_tracks(
            client,
            tokens.destination,
            target.ordered_for_write(diff.to_dest),
            ctx.progress(0),
        )

        to_remove = diff.to_remove_from_dest
        if not self._remove_missing:
            ctx.log("Removal disabled: skipping removal from destination")
        elif to_remove:
            ctx.log(
                f"One-way sync: removing {len(to_remove)} tracks "
                "from destination not present in source"
            )
            await target.remove_tracks(client, tokens.destination, to_remove)
            ctx.log(f"Removed {len(to_remove)} tracks from destination")
        else:
            ctx.log("No tracks to remove from destination")

        ctx.complete_item(0)
        ctx.log("One-way sync completed")

    async def _two_way(
        self,
        ctx: JobContext,
        client: SpotifyProtocol,
        tokens: ResolvedTokens,
        diff: Reconciliation,
    ) -> None:
        legs = (
            (self._destination, tokens.destination, diff.to_dest, "destination"),
            (self._source, tokens.source, diff.to_source, "source"),
        )
        for index, (ref, token, uris, side) in enumerate(legs):
            target = resolve_target(ref.id, self._config)
            ctx.start_item(index, total=len(uris))
            ctx.log(f"Two-way sync: adding {len(uris)} tracks to {side}")
            await target.add_tracks(
                client, token, target.ordered_for_write(uris), ctx.progress(index)
            )
            ctx.complete_item(index)

        ctx.log("Two-way sync completed")
