"""Tests for the observable calendar state."""

from __future__ import annotations

import datetime as dt
from unittest.mock import MagicMock, patch

import pytest

from igris.modules.calendar.models import CalendarEvent
from igris.modules.calendar.state import CalendarState


def _event(summary: str) -> CalendarEvent:
    return CalendarEvent(
        summary=summary,
        start=dt.datetime(2026, 2, 12, 10, 0),
        end=dt.datetime(2026, 2, 12, 11, 0),
    )


@pytest.fixture
def fake_manager():
    """A manager stand-in that answers completions like the real one."""
    mgr = MagicMock()
    mgr.fetched = [_event("Standup")]
    mgr.sign_in_ok = True
    mgr.add_ok = True
    mgr.fetch_error = None

    async def sign_in(completion=None):
        completion(mgr.sign_in_ok, None if mgr.sign_in_ok else RuntimeError("denied"))
        return mgr.sign_in_ok

    async def fetch_events(completion=None, **kwargs):
        if mgr.fetch_error:
            completion(None, mgr.fetch_error)
            return []
        completion(list(mgr.fetched), None)
        return list(mgr.fetched)

    async def add_event(summary, description, start_date, end_date, completion=None):
        completion(mgr.add_ok, None)
        if mgr.add_ok:
            mgr.fetched.append(_event(summary))
        return mgr.add_ok

    mgr.sign_in = MagicMock(side_effect=sign_in)
    mgr.fetch_events = MagicMock(side_effect=fetch_events)
    mgr.add_event = MagicMock(side_effect=add_event)
    return mgr


class TestCalendarState:
    """Tests for CalendarState."""

    def test_uses_shared_manager_by_default(self) -> None:
        """Without an explicit manager the process-wide one is used."""
        from igris.modules.calendar.manager import GoogleCalendarManager

        state = CalendarState()
        assert state._manager is GoogleCalendarManager.shared_manager()

    @pytest.mark.asyncio
    async def test_sign_in_loads_events(self, fake_manager) -> None:
        """Successful sign-in marks the state signed in and fetches events."""
        state = CalendarState(fake_manager)

        assert await state.sign_in() is True

        assert state.is_signed_in is True
        assert [e.summary for e in state.events] == ["Standup"]
        fake_manager.fetch_events.assert_called_once()

    @pytest.mark.asyncio
    async def test_failed_sign_in_skips_fetch(self, fake_manager) -> None:
        """A failed sign-in leaves the state signed out and does not fetch."""
        fake_manager.sign_in_ok = False
        state = CalendarState(fake_manager)

        assert await state.sign_in() is False

        assert state.is_signed_in is False
        fake_manager.fetch_events.assert_not_called()

    @pytest.mark.asyncio
    async def test_fetch_error_clears_events(self, fake_manager) -> None:
        """A failed fetch leaves an empty list."""
        state = CalendarState(fake_manager)
        state.events = [_event("Stale")]
        fake_manager.fetch_error = RuntimeError("HTTP 500")

        with patch("igris.modules.calendar.state.logger") as logger:
            assert await state.fetch_events() == []

        assert state.events == []
        event, = logger.warning.call_args.args
        assert event == "calendar_state_fetch_failed"
        assert "HTTP 500" in logger.warning.call_args.kwargs["error"]

    @pytest.mark.asyncio
    async def test_add_event_refetches(self, fake_manager) -> None:
        """Adding an event reloads the list."""
        state = CalendarState(fake_manager)
        start = dt.datetime(2026, 2, 13, 9, 0)

        assert await state.add_event("Review", None, start, start + dt.timedelta(hours=1)) is True

        assert [e.summary for e in state.events] == ["Standup", "Review"]

    @pytest.mark.asyncio
    async def test_failed_add_keeps_events(self, fake_manager) -> None:
        """A rejected add does not touch the list."""
        fake_manager.add_ok = False
        state = CalendarState(fake_manager)
        state.events = [_event("Standup")]
        start = dt.datetime(2026, 2, 13, 9, 0)

        assert await state.add_event("Review", None, start, start + dt.timedelta(hours=1)) is False

        fake_manager.fetch_events.assert_not_called()
        assert len(state.events) == 1

    @pytest.mark.asyncio
    async def test_sign_out_clears(self, fake_manager) -> None:
        """sign_out resets both fields and signs the manager out."""
        state = CalendarState(fake_manager)
        await state.sign_in()

        state.sign_out()

        fake_manager.sign_out.assert_called_once()
        assert state.is_signed_in is False
        assert state.events == []

    @pytest.mark.asyncio
    async def test_listeners_notified(self, fake_manager) -> None:
        """Listeners see each change; unsubscribed listeners stop receiving them."""
        state = CalendarState(fake_manager)
        seen: list[tuple[bool, int]] = []
        unsubscribe = state.subscribe(lambda s: seen.append((s.is_signed_in, len(s.events))))

        await state.sign_in()
        unsubscribe()
        state.sign_out()

        assert seen == [(True, 0), (True, 1)]
