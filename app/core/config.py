from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    This uses pydantic-settings so that we get type validation and defaults.
    Matching business policy (thresholds, capacity) is not configured here,
    see ``app.matching.config.MatchingPolicy``.
    """

    # App basics
    ENV: Literal["development", "staging", "production"] = "development"
    """Environment mode: affects log rendering and destructive DB commands."""

    DEBUG: bool = True
    """Enable debug mode: per-component score breakdowns in the logs."""

    APP_NAME: str = "Volunteer Matching Engine"
    """Display name used in the OpenAPI schema and startup logs."""

    LOG_LEVEL: str = "INFO"
    """Root log level for stdlib logging and structlog."""

    # DB
    DATABASE_URL: Optional[str] = None
    """Database connection URL. If None, uses a local SQLite file."""

    TEST_DATABASE_URL: Optional[str] = None
    """Test database URL. Separate from main DB for testing."""

    # Notifications
    NOTIFICATIONS_PERSIST: bool = True
    """Store volunteer notifications in the notifications table as well as logging them."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL or "sqlite+aiosqlite:///./volunteer_matching.db"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance to avoid re-parsing .env repeatedly."""
    return Settings()
