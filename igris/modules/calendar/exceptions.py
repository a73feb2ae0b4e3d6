"""Errors raised by the calendar module.

Vendor errors (``googleapiclient.errors.HttpError``,
``google.auth.exceptions.RefreshError``) are not wrapped and reach callers as-is.
"""


class CalendarError(Exception):
    """Base class for calendar errors."""


class SignInError(CalendarError):
    """Authorization could not be started or completed."""


class NotSignedInError(CalendarError):
    """An operation needs a signed-in session."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Cannot {operation}: not signed in to Google Calendar")
        self.operation = operation


class InvalidEventError(CalendarError):
    """An event was rejected before it was sent."""
