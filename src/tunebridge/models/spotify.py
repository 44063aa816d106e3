"""Models for parsing Spotify Web API responses.

These are internal models covering only the fields the engine reads.
Unknown fields are ignored.
"""

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "CurrentUser",
    "CreatedPlaylist",
    "Image",
    "Owner",
    "PlaylistDetails",
    "TokenResponse",
    "TrackPage",
]


class SpotifyModel(BaseModel):
    """Base model for Spotify responses."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class Image(SpotifyModel):
    """Playlist artwork."""

    url: str
    width: int | None = None
    height: int | None = None


class Owner(SpotifyModel):
    """Playlist owner reference."""

    id: str | None = None
    display_name: str | None = None


class PlaylistDetails(SpotifyModel):
    """Playlist metadata from GET /playlists/{id}."""

    id: str
    name: str
    description: str | None = None
    images: list[Image] | None = None
    owner: Owner | None = None

    @property
    def cover_url(self) -> str | None:
        """URL of the first (largest) image, if any."""
        return self.images[0].url if self.images else None

    @property
    def owner_id(self) -> str | None:
        return self.owner.id if self.owner else None


class CurrentUser(SpotifyModel):
    """Authenticated user from GET /me."""

    id: str
    display_name: str | None = None


class CreatedPlaylist(SpotifyModel):
    """Response of POST /me/playlists."""

    id: str


class _TrackRef(SpotifyModel):
    uri: str | None = None


class _PageItem(SpotifyModel):
    track: _TrackRef | None = None


class TrackPage(SpotifyModel):
    """One page of a playlist or saved-tracks listing."""

    items: list[_PageItem] = Field(default_factory=list)
    next: str | None = None
    total: int | None = None

    @property
    def uris(self) -> list[str]:
        """Track URIs on this page, skipping removed or URI-less entries."""
        return [
            item.track.uri for item in self.items if item.track and item.track.uri
        ]


class TokenResponse(SpotifyModel):
    """Response of the accounts service token endpoint."""

    access_token: str
    token_type: str = "Bearer"
    scope: str | None = None
    expires_in: int | None = None
    refresh_token: str | None = None
