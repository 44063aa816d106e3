"""Tests for Spotify response models and the job record."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError
from tunebridge.models.spotify import PlaylistDetails, TrackPage
from tunebridge_api.core.enums import ItemStatus, JobKind, JobStatus
from tunebridge_api.core.models import Credentials, Job, PlaylistProgress, PlaylistRef


class TestSpotifyModels:
    """Tests for parsing Spotify responses."""

    def test_playlist_without_images(self) -> None:
        details = PlaylistDetails.model_validate(
            {"id": "pl1", "name": "Mix", "images": None, "owner": None}
        )

        assert details.cover_url is None
        assert details.owner_id is None

    def test_ignores_unknown_fields(self) -> None:
        page = TrackPage.model_validate(
            {"items": [], "next": None, "href": "x", "limit": 100, "offset": 0}
        )

        assert page.uris == []


class TestJobSerialization:
    """Tests for the shape polling clients read."""

    def test_camel_case_and_epoch_millis(self) -> None:
        created = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
        job = Job(
            id="job-0001",
            kind=JobKind.TRANSFER,
            created_at=created,
            updated_at=created,
            items=[PlaylistProgress(playlist_id="pl1", playlist_name="Mix")],
        )

        data = job.model_dump(mode="json", by_alias=True)

        assert data["createdAt"] == 1704110400000
        assert data["updatedAt"] == 1704110400000
        assert data["status"] == "queued"
        assert data["items"][0] == {
            "playlistId": "pl1",
            "playlistName": "Mix",
            "status": "pending",
            "total": 0,
            "added": 0,
            "message": None,
            "error": None,
        }


class TestRequestModels:
    """Tests for request-side models."""

    def test_playlist_ref_requires_id(self) -> None:
        with pytest.raises(ValidationError):
            PlaylistRef(id="", name="Empty")

    def test_credentials_accept_camel_case(self) -> None:
        creds = Credentials.model_validate(
            {"sourceAccessToken": "s", "destRefreshToken": "r"}
        )

        assert creds.has_source
        assert creds.has_destination

    def test_credentials_missing_role(self) -> None:
        creds = Credentials(source_refresh_token="r")

        assert creds.has_source
        assert not creds.has_destination


class TestStatusEnums:
    """Tests for status helpers."""

    def test_finished_states(self) -> None:
        assert JobStatus.COMPLETED.is_finished
        assert JobStatus.FAILED.is_finished
        assert not JobStatus.RUNNING.is_finished
        assert not JobStatus.QUEUED.is_finished

    def test_item_ranks_move_forward(self) -> None:
        assert (
            ItemStatus.PENDING.rank
            < ItemStatus.RUNNING.rank
            < ItemStatus.COMPLETED.rank
        )
        assert ItemStatus.COMPLETED.rank == ItemStatus.FAILED.rank
