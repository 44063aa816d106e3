"""Track and playlist identifier utilities."""

import re
from collections.abc import Iterator, Sequence

# Pseudo-playlist id for the user's saved tracks ("Liked Songs")
LIKED_SONGS_ID = "liked_songs"
LIKED_SONGS_NAME = "Liked Songs"

TRACK_URI_PATTERN = re.compile(r"spotify:track:([A-Za-z0-9]+)")


def is_liked_songs(playlist_id: str) -> bool:
    """Check whether a playlist id names the saved-tracks collection."""
    return playlist_id == LIKED_SONGS_ID


def track_id_from_uri(uri: str) -> str | None:
    """Extract the bare track id from a Spotify track URI.

    Args:
        uri: Track URI, e.g. ``spotify:track:4uLU6hMCjMI75M1A2tKUQC``.

    Returns:
        The track id, or None for local files, episodes and malformed URIs.
    """
    if match := TRACK_URI_PATTERN.search(uri):
        return match.group(1)
    return None


def track_ids_from_uris(uris: Sequence[str]) -> list[str]:
    """Map track URIs to bare ids, dropping anything that is not a track."""
    return [track_id for uri in uris if (track_id := track_id_from_uri(uri))]


def chunked[T](items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive slices of at most ``size`` items, in order."""
    if size < 1:
        raise ValueError("size must be >= 1")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])
