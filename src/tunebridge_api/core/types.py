"""Shared type definitions for the application."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime

from tunebridge import SpotifyProtocol

# Callable type aliases for dependency injection
type Clock = Callable[[], datetime]
type IdGenerator = Callable[[], str]
type ClientFactory = Callable[[], AbstractAsyncContextManager[SpotifyProtocol]]
