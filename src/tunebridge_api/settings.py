"""Application settings using pydantic-settings."""

from datetime import tzinfo
from functools import cache
from typing import Annotated, Literal
from zoneinfo import ZoneInfo

from pydantic import BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from tunebridge import APIConfig
from tunebridge.config import DEFAULT_ACCOUNTS_URL, DEFAULT_API_URL

LogLevel = Annotated[
    Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    BeforeValidator(lambda v: v.upper() if isinstance(v, str) else v),
]


def _validate_timezone(v: str) -> str:
    """Validate timezone string by attempting to create ZoneInfo."""
    if isinstance(v, str):
        try:
            ZoneInfo(v)
        except (KeyError, ValueError) as e:
            raise ValueError(f"Invalid timezone: {v}") from e
    return v


Timezone = Annotated[str, BeforeValidator(_validate_timezone)]


def _strip_trailing_slash(v: str) -> str:
    return v.rstrip("/") if isinstance(v, str) else v


BaseURL = Annotated[str, BeforeValidator(_strip_trailing_slash)]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TUNEBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    reload: bool = Field(default=False, description="Enable auto-reload")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default="INFO", description="Log level")

    # CORS settings
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # Spotify settings
    spotify_client_id: str | None = Field(
        default=None,
        description="OAuth client id; required to refresh expired access tokens",
    )
    spotify_api_url: BaseURL = Field(
        default=DEFAULT_API_URL, description="Spotify Web API base URL"
    )
    spotify_accounts_url: BaseURL = Field(
        default=DEFAULT_ACCOUNTS_URL, description="Spotify accounts service URL"
    )

    # HTTP client
    http_timeout: float = Field(
        default=30.0, gt=0, description="Per-request timeout in seconds"
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries for rate-limited (429) and 5xx responses",
    )

    # Saved-tracks writes
    liked_songs_write_delay: float = Field(
        default=0.25,
        ge=0,
        description="Pause between saved-track additions in seconds",
    )

    # Timezone
    tz: Timezone = Field(default="UTC", description="Timezone for timestamps")

    @property
    def timezone(self) -> tzinfo:
        return ZoneInfo(self.tz)

    def api_config(self) -> APIConfig:
        """Build the engine configuration from these settings."""
        return APIConfig(
            api_url=self.spotify_api_url,
            accounts_url=self.spotify_accounts_url,
            timeout=self.http_timeout,
            max_retries=self.max_retries,
            saved_tracks_write_delay=self.liked_songs_write_delay,
        )


@cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
