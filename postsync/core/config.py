"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Freshness windows and remote endpoint settings are
validated at load time.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_EXPORTERS = ("console", "otlp", "none")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_windows_and_telemetry rejects
    negative durations and unknown exporters.
    """

    # App
    app_name: str = "postsync"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str | None = None

    # Remote posts service
    api_base_url: str = "https://jsonplaceholder.typicode.com"
    api_timeout_seconds: float = 10.0

    # Freshness windows (seconds). None = fresh until explicitly invalidated.
    posts_freshness_seconds: float | None = 60.0
    owner_posts_freshness_seconds: float | None = 60.0
    post_freshness_seconds: float | None = None
    users_freshness_seconds: float | None = 300.0
    stale_while_revalidate: bool = True

    # Mock remote service
    mock_latency_ms: int = 0

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_windows_and_telemetry(self) -> "Settings":
        """Reject negative windows/latency/timeouts, unknown log levels and exporters."""
        for name in (
            "posts_freshness_seconds",
            "owner_posts_freshness_seconds",
            "post_freshness_seconds",
            "users_freshness_seconds",
        ):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be >= 0 or unset, got: {value!r}")
        if self.api_timeout_seconds <= 0:
            raise ValueError(
                f"api_timeout_seconds must be positive, got: {self.api_timeout_seconds!r}"
            )
        if self.mock_latency_ms < 0:
            raise ValueError(
                f"mock_latency_ms must be >= 0, got: {self.mock_latency_ms!r}"
            )
        if self.log_level is not None and self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {_LOG_LEVELS}, got: {self.log_level!r}"
            )
        if self.telemetry_exporter not in _EXPORTERS:
            raise ValueError(
                f"telemetry_exporter must be one of {_EXPORTERS}, got: {self.telemetry_exporter!r}"
            )
        return self

    @staticmethod
    def _window(seconds: float | None) -> timedelta | None:
        return None if seconds is None else timedelta(seconds=seconds)

    @property
    def posts_freshness(self) -> timedelta | None:
        """Freshness window for the global posts collection view."""
        return self._window(self.posts_freshness_seconds)

    @property
    def owner_posts_freshness(self) -> timedelta | None:
        """Freshness window for per-owner posts collection views."""
        return self._window(self.owner_posts_freshness_seconds)

    @property
    def post_freshness(self) -> timedelta | None:
        """Freshness window for single-post views."""
        return self._window(self.post_freshness_seconds)

    @property
    def users_freshness(self) -> timedelta | None:
        """Freshness window for the users collection and single-user views."""
        return self._window(self.users_freshness_seconds)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
