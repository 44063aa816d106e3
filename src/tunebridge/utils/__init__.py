"""Utility functions for tunebridge.

Available via `from tunebridge.utils import ...`.
"""

from tunebridge.utils.ids import (
    LIKED_SONGS_ID,
    LIKED_SONGS_NAME,
    chunked,
    is_liked_songs,
    track_id_from_uri,
    track_ids_from_uris,
)

__all__ = [
    "LIKED_SONGS_ID",
    "LIKED_SONGS_NAME",
    "chunked",
    "is_liked_songs",
    "track_id_from_uri",
    "track_ids_from_uris",
]
