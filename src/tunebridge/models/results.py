"""Result models for reconciliation and best-effort steps."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from tunebridge.models.enums import CoverCopyStatus


class Reconciliation(BaseModel):
    """Identifiers needed to bring two collections into the desired state.

    Attributes:
        to_dest: Source identifiers missing from the destination, in source order.
        to_source: Destination identifiers missing from the source, in
            destination order. Used by two-way sync only.
        to_remove_from_dest: Destination identifiers missing from the source,
            in destination order. Used by one-way sync with removal enabled.
    """

    model_config = ConfigDict(frozen=True)

    to_dest: list[str] = Field(default_factory=list)
    to_source: list[str] = Field(default_factory=list)
    to_remove_from_dest: list[str] = Field(default_factory=list)


class CoverCopyResult(BaseModel):
    """Outcome of copying a playlist cover image.

    Attributes:
        status: Whether the image was copied, skipped, or failed (ignored).
        reason: Human-readable explanation for skipped/failed outcomes.
    """

    model_config = ConfigDict(frozen=True)

    status: CoverCopyStatus
    reason: str | None = None

    @classmethod
    def copied(cls) -> CoverCopyResult:
        return cls(status=CoverCopyStatus.COPIED)

    @classmethod
    def skipped(cls, reason: str) -> CoverCopyResult:
        return cls(status=CoverCopyStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> CoverCopyResult:
        return cls(status=CoverCopyStatus.FAILED, reason=reason)
