"""tunebridge - Move and reconcile playlists between two Spotify accounts.

This library provides the provider-facing half of the transfer engine:
an async Spotify Web API client, a credential provider, a paginated track
reader, write targets for playlists and saved tracks, a reconciler, and a
best-effort cover copier.

Examples:
    Copy the tracks of one playlist into another:
    ```python
    from tunebridge import SpotifyClient, TrackReader, resolve_target

    async with SpotifyClient() as client:
        uris = await TrackReader(client).read_all_tracks(token, "37i9dQZF1DX...")
        await resolve_target("3cEYpjA9oz9GiPac4AsH4n").add_tracks(client, token, uris)
    ```

    Compute a one-way diff:
    ```python
    from tunebridge import reconcile

    diff = reconcile(["a", "b", "c"], ["b", "d"])
    diff.to_dest  # ["a", "c"]
    diff.to_remove_from_dest  # ["d"]
    ```
"""

from tunebridge.auth import CredentialProvider
from tunebridge.client import SpotifyClient, SpotifyProtocol
from tunebridge.config import APIConfig
from tunebridge.exceptions import (
    AuthError,
    BestEffortError,
    FetchError,
    MutationError,
    SpotifyAPIError,
    TuneBridgeError,
)
from tunebridge.models import (
    CoverCopyResult,
    CoverCopyStatus,
    Reconciliation,
    TargetKind,
)
from tunebridge.services import (
    CoverCopier,
    PlaylistTarget,
    ProgressCallback,
    SavedTracksTarget,
    TrackReader,
    WriteTarget,
    reconcile,
    resolve_target,
)
from tunebridge.utils import LIKED_SONGS_ID, LIKED_SONGS_NAME, is_liked_songs

__all__ = [
    "LIKED_SONGS_ID",
    "LIKED_SONGS_NAME",
    "APIConfig",
    "AuthError",
    "BestEffortError",
    "CoverCopier",
    "CoverCopyResult",
    "CoverCopyStatus",
    "CredentialProvider",
    "FetchError",
    "MutationError",
    "PlaylistTarget",
    "ProgressCallback",
    "Reconciliation",
    "SavedTracksTarget",
    "SpotifyAPIError",
    "SpotifyClient",
    "SpotifyProtocol",
    "TargetKind",
    "TrackReader",
    "TuneBridgeError",
    "WriteTarget",
    "is_liked_songs",
    "reconcile",
    "resolve_target",
]
