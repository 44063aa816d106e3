"""Test fixtures and configuration for tunebridge tests.

This module provides shared fixtures organized into:
- Time utilities: Deterministic clock and id generator for the job store
- Spotify fake: In-memory implementation of SpotifyProtocol
- Factory fixtures: Builders for playlist references and credentials
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from fakes import DEST_TOKEN, SOURCE_TOKEN, FakeSpotify
from tunebridge_api.core.models import Credentials, PlaylistRef
from tunebridge_api.services.job_store import JobStore

# =============================================================================
# Time Utilities
# =============================================================================


class MockClock:
    """Mock clock for deterministic time-based testing.

    Usage:
        clock = MockClock()
        clock.advance(60)  # Advance by 60 seconds
        clock.set(datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC))
    """

    def __init__(self, initial: datetime | None = None) -> None:
        self._time = initial or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self._time

    def advance(self, seconds: int) -> None:
        """Advance the clock by the specified seconds."""
        self._time += timedelta(seconds=seconds)

    def set(self, time: datetime) -> None:
        """Set the clock to a specific time."""
        self._time = time


class MockIdGenerator:
    """Mock ID generator for deterministic ID generation.

    Usage:
        gen = MockIdGenerator(prefix="job")
        gen()  # Returns "job-0001"
        gen()  # Returns "job-0002"
    """

    def __init__(self, prefix: str = "job") -> None:
        self._counter = 0
        self._prefix = prefix

    def __call__(self) -> str:
        self._counter += 1
        return f"{self._prefix}-{self._counter:04d}"

    def reset(self) -> None:
        """Reset the counter."""
        self._counter = 0


@pytest.fixture
def clock() -> MockClock:
    """Provide a mock clock."""
    return MockClock()


@pytest.fixture
def id_generator() -> MockIdGenerator:
    """Provide a mock ID generator."""
    return MockIdGenerator()


@pytest.fixture
def store(clock: MockClock, id_generator: MockIdGenerator) -> JobStore:
    """Provide a configured JobStore instance."""
    return JobStore(clock=clock, id_generator=id_generator)


# =============================================================================
# Spotify Fixtures
# =============================================================================


@pytest.fixture
def spotify() -> FakeSpotify:
    """Provide an in-memory Spotify fake."""
    return FakeSpotify()


@pytest.fixture
def sleeps() -> list[float]:
    """Delays requested by the saved-tracks writer."""
    return []


@pytest.fixture
def fake_sleep(sleeps: list[float]) -> Callable[[float], Any]:
    """Sleep replacement that records delays instead of waiting."""

    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return _sleep


# =============================================================================
# Factory Fixtures
# =============================================================================


@pytest.fixture
def credentials() -> Credentials:
    """Credential bundle with access tokens for both roles."""
    return Credentials(source_access_token=SOURCE_TOKEN, dest_access_token=DEST_TOKEN)


@pytest.fixture
def make_ref() -> Callable[..., PlaylistRef]:
    """Factory for playlist references."""

    def _make_ref(playlist_id: str, name: str | None = None) -> PlaylistRef:
        return PlaylistRef(id=playlist_id, name=name or playlist_id.title())

    return _make_ref

