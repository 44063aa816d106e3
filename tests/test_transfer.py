"""Tests for the transfer job body."""

from __future__ import annotations

from typing import Any

import pytest
from conftest import MockClock, MockIdGenerator
from fakes import DEST_TOKEN, DEST_USER, SOURCE_TOKEN, FakeSpotify, uri
from tunebridge import LIKED_SONGS_ID, APIConfig, FetchError, MutationError
from tunebridge_api.core.enums import ItemStatus, JobStatus
from tunebridge_api.core.models import Job, PlaylistRef
from tunebridge_api.services.job_context import JobContext, ResolvedTokens
from tunebridge_api.services.job_store import JobStore
from tunebridge_api.services.transfer import TransferJob

TOKENS = ResolvedTokens(source=SOURCE_TOKEN, destination=DEST_TOKEN)


class RecordingStore(JobStore):
    """JobStore that keeps a history of progress and item statuses."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.progress: list[tuple[int, int]] = []
        self.status_history: dict[int, list[ItemStatus]] = {}

    def add_progress(self, job_id: str, index: int, count: int) -> bool:
        self.progress.append((index, count))
        return super().add_progress(job_id, index, count)

    def update_item(self, job_id: str, index: int, **kwargs: Any) -> bool:
        applied = super().update_item(job_id, index, **kwargs)
        job = self.get(job_id)
        assert job is not None
        self.status_history.setdefault(index, []).append(job.items[index].status)
        return applied


@pytest.fixture
def recording_store(clock: MockClock, id_generator: MockIdGenerator) -> RecordingStore:
    return RecordingStore(clock=clock, id_generator=id_generator)


async def run_transfer(
    store: JobStore, spotify: FakeSpotify, refs: list[PlaylistRef]
) -> Job:
    body = TransferJob(refs, APIConfig(saved_tracks_write_delay=0))
    job = store.create(body.kind, body.items())
    store.start(job.id)
    await body.run(JobContext(job.id, store), spotify, TOKENS)
    finished = store.finish(job.id)
    assert finished is not None
    return finished


def tracks(prefix: str, count: int) -> list[str | None]:
    return [uri(f"{prefix}{i:03d}") for i in range(count)]


class TestTransfer:
    """Tests for copying playlists."""

    @pytest.mark.asyncio
    async def test_two_playlists_complete_with_batched_progress(
        self, recording_store: RecordingStore
    ) -> None:
        """120 and 30 tracks: progress 100 then 20, then 30; job completed."""
        spotify = FakeSpotify(page_size=100)
        spotify.add_playlist("p1", "First", tracks("a", 120))
        spotify.add_playlist("p2", "Second", tracks("b", 30))

        job = await run_transfer(
            recording_store,
            spotify,
            [PlaylistRef(id="p1", name="First"), PlaylistRef(id="p2", name="Second")],
        )

        assert job.status == JobStatus.COMPLETED
        assert recording_store.progress == [(0, 100), (0, 20), (1, 30)]
        first, second = job.items
        assert (first.added, first.total, first.status) == (
            120,
            120,
            ItemStatus.COMPLETED,
        )
        assert first.message == "120/120"
        assert (second.added, second.total, second.status) == (
            30,
            30,
            ItemStatus.COMPLETED,
        )
        assert spotify.playlists["created-1"] == tracks("a", 120)
        assert spotify.playlists["created-2"] == tracks("b", 30)

    @pytest.mark.asyncio
    async def test_log_narrative(self, store: JobStore, spotify: FakeSpotify) -> None:
        spotify.add_playlist("p1", "Road Trip", tracks("a", 3))

        job = await run_transfer(
            store, spotify, [PlaylistRef(id="p1", name="Road Trip")]
        )

        assert job.logs == [
            "Reading playlist: Road Trip",
            "Found 3 tracks",
            "Creating destination playlist: Road Trip",
            "Adding tracks...",
            "Completed: Road Trip",
        ]

    @pytest.mark.asyncio
    async def test_failure_is_isolated_to_its_item(
        self, store: JobStore, spotify: FakeSpotify
    ) -> None:
        """Item 2's read fails after item 1 completed; item 3 still runs."""
        spotify.add_playlist("p1", "One", tracks("a", 2))
        spotify.add_playlist("p2", "Two", tracks("b", 2))
        spotify.add_playlist("p3", "Three", tracks("c", 2))
        del spotify.playlists["p2"]

        job = await run_transfer(
            store,
            spotify,
            [
                PlaylistRef(id="p1", name="One"),
                PlaylistRef(id="p2", name="Two"),
                PlaylistRef(id="p3", name="Three"),
            ],
        )

        assert job.status == JobStatus.FAILED
        assert [item.status for item in job.items] == [
            ItemStatus.COMPLETED,
            ItemStatus.FAILED,
            ItemStatus.COMPLETED,
        ]
        assert job.items[1].error
        failure_lines = [line for line in job.logs if line.startswith("Failed")]
        assert failure_lines == [f"Failed Two: {job.items[1].error}"]

    @pytest.mark.asyncio
    async def test_item_statuses_never_move_backwards(
        self, recording_store: RecordingStore, spotify: FakeSpotify
    ) -> None:
        spotify.add_playlist("p1", "One", tracks("a", 5))
        spotify.fail("add_to_playlist", MutationError("Failed to add tracks"))

        await run_transfer(recording_store, spotify, [PlaylistRef(id="p1", name="One")])

        ranks = [status.rank for status in recording_store.status_history[0]]
        assert ranks == sorted(ranks)
        assert recording_store.status_history[0][-1] == ItemStatus.FAILED

    @pytest.mark.asyncio
    async def test_liked_songs_copied_into_new_playlist(
        self, store: JobStore, spotify: FakeSpotify
    ) -> None:
        spotify.saved[SOURCE_TOKEN] = [uri("new"), uri("old")]

        job = await run_transfer(
            store, spotify, [PlaylistRef(id=LIKED_SONGS_ID, name="Liked Songs")]
        )

        assert job.status == JobStatus.COMPLETED
        assert spotify.method_calls("get_playlist") == []
        assert spotify.method_calls("create_playlist")[0][1] == "Liked Songs"
        assert spotify.playlists["created-1"] == [uri("new"), uri("old")]

    @pytest.mark.asyncio
    async def test_cover_is_copied(self, store: JobStore, spotify: FakeSpotify) -> None:
        spotify.add_playlist("p1", "Art", tracks("a", 1), image_url="https://img/1")
        spotify.images["https://img/1"] = (b"jpeg", "image/jpeg")

        await run_transfer(store, spotify, [PlaylistRef(id="p1", name="Art")])

        assert spotify.covers == {"created-1": b"jpeg"}

    @pytest.mark.asyncio
    async def test_cover_failure_does_not_fail_item(
        self, store: JobStore, spotify: FakeSpotify
    ) -> None:
        spotify.add_playlist("p1", "Art", tracks("a", 1), image_url="https://img/404")

        job = await run_transfer(
            store, spotify, [PlaylistRef(id="p1", name="Art")]
        )

        assert job.status == JobStatus.COMPLETED
        assert any(line.startswith("Cover image not copied") for line in job.logs)

    @pytest.mark.asyncio
    async def test_invalid_destination_token_fails_before_any_item(
        self, store: JobStore, spotify: FakeSpotify
    ) -> None:
        """The destination account is checked once, before the first item."""
        spotify.add_playlist("p1", "One", tracks("a", 1))
        body = TransferJob([PlaylistRef(id="p1", name="One")])
        job = store.create(body.kind, body.items())

        with pytest.raises(FetchError):
            await body.run(
                JobContext(job.id, store),
                spotify,
                ResolvedTokens(source=SOURCE_TOKEN, destination="expired"),
            )

        assert spotify.method_calls("get_playlist") == []


class TestFollowForeignPlaylists:
    """Tests for following playlists the source user does not own."""

    @pytest.mark.asyncio
    async def test_foreign_playlist_is_followed_not_copied(
        self, store: JobStore, spotify: FakeSpotify
    ) -> None:
        spotify.add_playlist("p1", "Editorial", tracks("a", 3), owner="spotify")

        job = await run_transfer(
            store, spotify, [PlaylistRef(id="p1", name="Editorial")]
        )

        assert job.status == JobStatus.COMPLETED
        assert spotify.followed == ["p1"]
        assert spotify.method_calls("create_playlist") == []
        assert spotify.method_calls("get_track_page") == []
        assert job.logs == [
            "Reading playlist: Editorial",
            "Adding playlist to destination library: Editorial",
            "Added to library: Editorial",
        ]

    @pytest.mark.asyncio
    async def test_failed_follow_falls_back_to_copy(
        self, store: JobStore, spotify: FakeSpotify
    ) -> None:
        spotify.add_playlist("p1", "Editorial", tracks("a", 3), owner="spotify")
        spotify.fail("follow_playlist", MutationError("Failed to follow", status=403))

        job = await run_transfer(
            store, spotify, [PlaylistRef(id="p1", name="Editorial")]
        )

        assert job.status == JobStatus.COMPLETED
        assert "Follow failed (status 403). Creating a copy instead..." in job.logs
        assert spotify.playlists["created-1"] == tracks("a", 3)

    @pytest.mark.asyncio
    async def test_own_playlist_is_copied(
        self, store: JobStore, spotify: FakeSpotify
    ) -> None:
        spotify.add_playlist("p1", "Mine", tracks("a", 1))

        await run_transfer(store, spotify, [PlaylistRef(id="p1", name="Mine")])

        assert spotify.followed == []
        created_by = spotify.method_calls("create_playlist")[0][0]
        assert created_by == DEST_TOKEN
        assert spotify.details["created-1"].owner_id == DEST_USER
