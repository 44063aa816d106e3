"""Core domain models for the API.

Serialized with camelCase aliases and epoch-millisecond timestamps, the
shape polling clients read from the status endpoint.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from tunebridge_api.core.enums import ItemStatus, JobKind, JobStatus


class CamelModel(BaseModel):
    """Base model accepting both snake_case and camelCase input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlaylistRef(CamelModel):
    """Reference to a playlist picked by the user."""

    id: str = Field(min_length=1)
    name: str


class Credentials(CamelModel):
    """Bearer credentials for the source and destination accounts."""

    source_access_token: str | None = None
    source_refresh_token: str | None = None
    dest_access_token: str | None = None
    dest_refresh_token: str | None = None

    @property
    def has_source(self) -> bool:
        return bool(self.source_access_token or self.source_refresh_token)

    @property
    def has_destination(self) -> bool:
        return bool(self.dest_access_token or self.dest_refresh_token)


class PlaylistProgress(CamelModel):
    """Progress of one item (one playlist copy, or one sync direction)."""

    model_config = ConfigDict(validate_assignment=True)

    playlist_id: str
    playlist_name: str
    status: ItemStatus = ItemStatus.PENDING
    total: int = Field(default=0, ge=0)
    added: int = Field(default=0, ge=0)
    message: str | None = None
    error: str | None = None


def _epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


class Job(CamelModel):
    """A background transfer or sync job."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    kind: JobKind
    status: JobStatus = JobStatus.QUEUED
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    logs: list[str] = Field(default_factory=list)
    items: list[PlaylistProgress] = Field(default_factory=list)

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> int:
        return _epoch_ms(value)
