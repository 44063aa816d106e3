"""Enumerations for tunebridge domain models."""

from enum import StrEnum


class TargetKind(StrEnum):
    """Mutation semantics of a track collection."""

    PLAYLIST = "playlist"  # Batchable, order follows request order
    SAVED_TRACKS = "saved_tracks"  # One id per write, ordered by added_at


class CoverCopyStatus(StrEnum):
    """Outcome of a best-effort cover image copy."""

    COPIED = "copied"
    SKIPPED = "skipped"
    FAILED = "failed"
