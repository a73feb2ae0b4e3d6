"""Centralized configuration loaded from environment variables."""

from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide settings sourced from .env / environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── General ──────────────────────────────────────────────────────
    igris_env: str = "development"
    igris_log_level: str = "INFO"

    # ── Google Calendar ──────────────────────────────────────────────
    google_credentials_file: str = "config/google_credentials.json"
    google_token_file: str = "config/google_token.json"
    google_calendar_id: str = "primary"
    google_oauth_port: int = 0
    google_scopes: str = "https://www.googleapis.com/auth/calendar"

    calendar_time_zone: str = "UTC"
    calendar_max_results: int = 250

    # ── Derived ──────────────────────────────────────────────────────
    @property
    def scopes(self) -> list[str]:
        """Parse comma-separated OAuth scopes."""
        return [s.strip() for s in self.google_scopes.split(",") if s.strip()]


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
