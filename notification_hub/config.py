"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

DEFAULT_API_BASE_URL = "https://grace-elite-academy-api.onrender.com/api"


class Settings(BaseSettings):
    """Configuration values for the notification hub loaded from the environment."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Base URL of the REST backend serving the notification list",
        min_length=1,
    )
    api_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds applied to REST requests",
        gt=0,
    )
    socket_url: str | None = Field(
        default=None,
        description="Realtime endpoint; derived from API_BASE_URL when omitted",
    )
    socket_path: str = Field(
        default="socket.io",
        description="Socket.IO path mounted by the realtime server",
        min_length=1,
    )
    reconnect_base_delay: float = Field(
        default=1.0,
        description="Delay in seconds before the first reconnection attempt",
        gt=0,
    )
    max_reconnect_attempts: int = Field(
        default=5,
        description="Number of automatic reconnection attempts before giving up",
        ge=0,
    )
    desktop_auto_dismiss_seconds: float = Field(
        default=10.0,
        description="Seconds before normal priority desktop notifications close",
        gt=0,
    )
    desktop_icon: str = Field(
        default="/favicon.ico",
        description="Icon shown on desktop notifications",
    )
    baseline_limit: int = Field(
        default=100,
        description="Maximum number of notifications requested for the baseline",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used when stamping read and presence timestamps",
    )

    @model_validator(mode="after")
    def _derive_socket_url(self) -> "Settings":
        if not self.socket_url:
            self.socket_url = derive_socket_url(self.api_base_url)
        return self


def derive_socket_url(api_base_url: str) -> str:
    """Return the realtime endpoint for ``api_base_url`` (without the ``/api`` suffix)."""

    base = api_base_url.rstrip("/")
    if base.endswith("/api"):
        base = base[: -len("/api")]
    return base


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "derive_socket_url", "get_settings", "reset_settings_cache"]
