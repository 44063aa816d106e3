"""Configuration for tunebridge."""

from dataclasses import dataclass

DEFAULT_API_URL = "https://api.spotify.com/v1"
DEFAULT_ACCOUNTS_URL = "https://accounts.spotify.com"


@dataclass(frozen=True)
class APIConfig:
    """Spotify Web API configuration.

    Attributes:
        api_url: Base URL of the Web API (no trailing slash).
        accounts_url: Base URL of the accounts service used for token refresh.
        timeout: Per-request timeout in seconds.
        max_retries: Retries for 429 and 5xx responses before giving up.
        retry_base_delay: Base delay for exponential backoff, in seconds.
        max_retry_after: Upper bound on any single retry wait, in seconds.
        playlist_page_size: Page size when listing playlist tracks.
        saved_tracks_page_size: Page size when listing saved tracks.
        batch_size: Maximum identifiers per playlist mutation request.
        saved_tracks_write_delay: Pause between saved-track additions, in
            seconds. Keeps server-assigned added_at timestamps distinct.
    """

    api_url: str = DEFAULT_API_URL
    accounts_url: str = DEFAULT_ACCOUNTS_URL
    timeout: float = 30.0
    max_retries: int = 3
    retry_base_delay: float = 1.0
    max_retry_after: float = 60.0
    playlist_page_size: int = 100
    saved_tracks_page_size: int = 50
    batch_size: int = 100
    saved_tracks_write_delay: float = 0.25
