"""Engine services: reading, writing, reconciling and cover copy."""

from tunebridge.services.cover import CoverCopier
from tunebridge.services.reader import TrackReader
from tunebridge.services.reconciler import reconcile
from tunebridge.services.targets import (
    PlaylistTarget,
    ProgressCallback,
    SavedTracksTarget,
    WriteTarget,
    resolve_target,
)

__all__ = [
    "CoverCopier",
    "PlaylistTarget",
    "ProgressCallback",
    "SavedTracksTarget",
    "TrackReader",
    "WriteTarget",
    "reconcile",
    "resolve_target",
]
