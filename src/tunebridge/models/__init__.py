"""Data models for tunebridge.

Public API:
    Reconciliation - Output of the reconciler
    CoverCopyResult - Outcome of a best-effort cover copy
    TargetKind, CoverCopyStatus - Enumerations

Internal (not exported):
    spotify.py - Models for parsing Spotify Web API responses
"""

from tunebridge.models.enums import CoverCopyStatus, TargetKind
from tunebridge.models.results import CoverCopyResult, Reconciliation

__all__ = [
    "CoverCopyResult",
    "CoverCopyStatus",
    "Reconciliation",
    "TargetKind",
]
