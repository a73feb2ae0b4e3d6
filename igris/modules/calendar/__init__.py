"""Google Calendar integration."""

from igris.modules.calendar.exceptions import (
    CalendarError,
    InvalidEventError,
    NotSignedInError,
    SignInError,
)
from igris.modules.calendar.manager import GoogleCalendarManager
from igris.modules.calendar.models import CalendarEvent
from igris.modules.calendar.state import CalendarState

__all__ = [
    "CalendarError",
    "CalendarEvent",
    "CalendarState",
    "GoogleCalendarManager",
    "InvalidEventError",
    "NotSignedInError",
    "SignInError",
]
