"""Job API schemas."""

from typing import Annotated

from pydantic import Field

from tunebridge_api.core.enums import SyncMode
from tunebridge_api.core.models import CamelModel, Credentials, Job, PlaylistRef

PlaylistSelection = Annotated[list[PlaylistRef], Field(min_length=1)]


class CreateTransferRequest(CamelModel):
    """Request to copy playlists into the destination account."""

    playlists: PlaylistSelection = Field(
        description="Source playlists to copy; 'liked_songs' selects saved tracks",
        examples=[[{"id": "37i9dQZF1DXcBWIGoYBM5M", "name": "Today's Top Hits"}]],
    )
    auth: Credentials | None = Field(
        default=None,
        description="Bearer credentials. Read from cookies if not set.",
    )


class CreateSyncRequest(CamelModel):
    """Request to reconcile a source playlist with a destination playlist."""

    source: PlaylistRef
    destination: PlaylistRef
    mode: SyncMode = Field(description="one_way or two_way")
    remove_missing: bool = Field(
        default=False,
        description="One-way only: remove destination tracks absent from source",
    )
    auth: Credentials | None = Field(
        default=None,
        description="Bearer credentials. Read from cookies if not set.",
    )


class JobsResponse(CamelModel):
    """Response for listing jobs."""

    jobs: list[Job]


class JobCreatedResponse(CamelModel):
    """Response when a job is created: its id and initial snapshot."""

    id: str
    state: Job
