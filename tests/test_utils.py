"""Tests for identifier utilities."""

import pytest
from tunebridge.utils import (
    LIKED_SONGS_ID,
    chunked,
    is_liked_songs,
    track_id_from_uri,
    track_ids_from_uris,
)


class TestIsLikedSongs:
    """Tests for the saved-tracks sentinel check."""

    def test_sentinel_matches(self) -> None:
        assert is_liked_songs(LIKED_SONGS_ID)

    @pytest.mark.parametrize("playlist_id", ["37i9dQZF1DX", "Liked_Songs", ""])
    def test_other_ids_do_not_match(self, playlist_id: str) -> None:
        assert not is_liked_songs(playlist_id)


class TestTrackIdFromUri:
    """Tests for track_id_from_uri."""

    def test_extracts_id(self) -> None:
        assert track_id_from_uri("spotify:track:4uLU6hMCjMI75M1A2tKUQC") == (
            "4uLU6hMCjMI75M1A2tKUQC"
        )

    @pytest.mark.parametrize(
        "uri",
        [
            "spotify:local:Artist:Album:Title:215",
            "spotify:episode:512ojhOuo1ktJprKbVcKyQ",
            "not a uri",
        ],
    )
    def test_returns_none_for_non_tracks(self, uri: str) -> None:
        """Local files and episodes cannot be saved as tracks."""
        assert track_id_from_uri(uri) is None

    def test_drops_non_tracks_and_keeps_order(self) -> None:
        uris = [
            "spotify:track:b",
            "spotify:local:x:y:z:1",
            "spotify:track:a",
        ]
        assert track_ids_from_uris(uris) == ["b", "a"]


class TestChunked:
    """Tests for chunked."""

    def test_splits_in_order(self) -> None:
        assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]

    def test_exact_multiple(self) -> None:
        assert list(chunked(list(range(200)), 100)) == [
            list(range(100)),
            list(range(100, 200)),
        ]

    def test_empty_input_yields_nothing(self) -> None:
        assert list(chunked([], 100)) == []

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError, match="size"):
            list(chunked([1], 0))
