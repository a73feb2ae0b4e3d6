"""Shared test fixtures and configuration."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

os.environ.setdefault("IGRIS_ENV", "test")
os.environ.setdefault("IGRIS_LOG_LEVEL", "WARNING")

from igris.config import Settings
from igris.modules.calendar.manager import GoogleCalendarManager


def _google_item(
    event_id: str,
    summary: str,
    start: str = "2026-02-12T10:00:00Z",
    end: str = "2026-02-12T11:00:00Z",
    **extra,
) -> dict:
    item = {
        "id": event_id,
        "summary": summary,
        "start": {"dateTime": start},
        "end": {"dateTime": end},
    }
    item.update(extra)
    return item


@pytest.fixture
def google_item():
    """Factory for raw Calendar API event items."""
    return _google_item


@pytest.fixture(autouse=True)
def reset_shared_manager():
    """Each test starts without a process-wide manager."""
    GoogleCalendarManager.reset_shared()
    yield
    GoogleCalendarManager.reset_shared()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Return test settings pointing at a temporary config directory."""
    return Settings(
        igris_env="test",
        igris_log_level="WARNING",
        google_credentials_file=str(tmp_path / "config" / "google_credentials.json"),
        google_token_file=str(tmp_path / "config" / "google_token.json"),
        google_calendar_id="primary",
        calendar_time_zone="Europe/Amsterdam",
        calendar_max_results=250,
        _env_file=None,
    )


@pytest.fixture
def mock_service():
    """Mock Calendar API resource with an empty events listing."""
    service = MagicMock()
    service.events.return_value.list.return_value.execute.return_value = {"items": []}
    service.events.return_value.insert.return_value.execute.return_value = {"id": "evt-new"}
    return service


@pytest.fixture
def manager(settings, mock_service) -> GoogleCalendarManager:
    """A signed-in manager backed by the mock service."""
    mgr = GoogleCalendarManager(settings)
    mgr.service = mock_service
    return mgr
