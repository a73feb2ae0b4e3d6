"""Observable calendar state for UI and CLI consumers.

Wraps the shared manager: signing in loads events, adding an event reloads
them, and signing out clears everything. Listeners are notified after each
change.
"""

from __future__ import annotations

import datetime as dt
from typing import Callable, Optional

from igris.logging_config import get_logger
from igris.modules.calendar.manager import GoogleCalendarManager
from igris.modules.calendar.models import CalendarEvent

logger = get_logger(__name__)

Listener = Callable[["CalendarState"], None]


class CalendarState:
    """Signed-in flag and current event list, kept in step with the manager."""

    def __init__(self, manager: Optional[GoogleCalendarManager] = None) -> None:
        self._manager = manager or GoogleCalendarManager.shared_manager()
        self._listeners: list[Listener] = []
        self.is_signed_in = False
        self.events: list[CalendarEvent] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    async def sign_in(self) -> bool:
        success = await self._manager.sign_in(completion=lambda ok, err: None)
        self.is_signed_in = success
        self._notify()
        if success:
            await self.fetch_events()
        return success

    def sign_out(self) -> None:
        self._manager.sign_out()
        self.is_signed_in = False
        self.events = []
        logger.info("calendar_state_cleared")
        self._notify()

    async def fetch_events(self) -> list[CalendarEvent]:
        events: list[CalendarEvent] = []

        def _done(result: Optional[list[CalendarEvent]], error: Optional[Exception]) -> None:
            if error is not None:
                logger.warning("calendar_state_fetch_failed", error=f"{type(error).__name__}: {error}")
            if result is not None:
                events.extend(result)

        await self._manager.fetch_events(completion=_done)
        self.events = events
        self._notify()
        return events

    async def add_event(
        self,
        summary: str,
        description: Optional[str],
        start_date: dt.datetime,
        end_date: dt.datetime,
    ) -> bool:
        """Add an event and reload the list on success."""
        success = await self._manager.add_event(
            summary, description, start_date, end_date, completion=lambda ok, err: None,
        )
        if success:
            await self.fetch_events()
        return success
