"""Google Calendar manager: a process-wide wrapper around the Calendar API client.

The manager owns a single built ``calendar`` v3 service. Sign-in runs the
installed-app OAuth flow (or reuses / refreshes a stored token), and the
fetch and add operations forward to ``events().list`` and ``events().insert``.

Every async operation accepts an optional ``completion`` callback, invoked once
with the outcome: ``(success, error)`` for sign-in and add, ``(events, error)``
for fetch. When a completion is given, failures are delivered to it and the
coroutine returns the failure value. Without one, the underlying error is
raised unchanged.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import inspect
import threading
from pathlib import Path
from typing import Any, Callable, Optional

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from igris.config import Settings, get_settings
from igris.logging_config import get_logger
from igris.modules.calendar.exceptions import InvalidEventError, NotSignedInError, SignInError
from igris.modules.calendar.models import CalendarEvent

logger = get_logger(__name__)

Completion = Callable[..., Any]

_TRANSIENT_STATUSES = frozenset({429, 500, 502, 503, 504})
# Calendar API upper bound for maxResults on events.list
_PAGE_SIZE_LIMIT = 2500


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, HttpError) and exc.resp.status in _TRANSIENT_STATUSES


@retry(
    retry=retry_if_exception(_is_transient),
    stop=stop_after_attempt(3),
    wait=wait_exponential(min=1, max=10),
    reraise=True,
)
def _execute(request: Any) -> Any:
    return request.execute()


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


def _rfc3339(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.UTC)
    return value.isoformat()


async def _deliver(completion: Optional[Completion], *args: Any) -> None:
    if completion is None:
        return
    result = completion(*args)
    if inspect.isawaitable(result):
        await result


class GoogleCalendarManager:
    """Singleton facade over the Google Calendar API."""

    _shared: Optional[GoogleCalendarManager] = None
    _shared_lock = threading.Lock()

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._service: Any = None
        self._credentials: Optional[Credentials] = None

    @classmethod
    def shared_manager(cls) -> GoogleCalendarManager:
        """Return the process-wide manager, creating it on first use."""
        with cls._shared_lock:
            if cls._shared is None:
                cls._shared = cls()
            return cls._shared

    @classmethod
    def reset_shared(cls) -> None:
        """Forget the process-wide manager so the next call builds a fresh one."""
        with cls._shared_lock:
            cls._shared = None

    @property
    def service(self) -> Any:
        """The built Calendar API resource, or None when signed out."""
        return self._service

    @service.setter
    def service(self, value: Any) -> None:
        self._service = value

    @property
    def is_signed_in(self) -> bool:
        return self._service is not None

    # ── Sign in / out ────────────────────────────────────────────────

    def _authorize(self) -> Credentials:
        """Load, refresh or interactively obtain OAuth credentials (blocking)."""
        scopes = self._settings.scopes
        token_path = Path(self._settings.google_token_file)

        creds: Optional[Credentials] = None
        if token_path.exists():
            creds = Credentials.from_authorized_user_file(str(token_path), scopes)

        if creds and creds.valid:
            return creds

        if creds and creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
                logger.info("google_token_refreshed")
            except RefreshError as exc:
                logger.warning("google_token_refresh_failed", error=str(exc))
                creds = None
        else:
            creds = None

        if creds is None:
            secrets_path = Path(self._settings.google_credentials_file)
            if not secrets_path.exists():
                raise SignInError(f"Google client secrets file not found: {secrets_path}")
            flow = InstalledAppFlow.from_client_secrets_file(str(secrets_path), scopes)
            creds = flow.run_local_server(port=self._settings.google_oauth_port)

        token_path.parent.mkdir(parents=True, exist_ok=True)
        token_path.write_text(creds.to_json())
        return creds

    def _connect(self) -> tuple[Credentials, Any]:
        creds = self._authorize()
        service = build("calendar", "v3", credentials=creds, cache_discovery=False)
        return creds, service

    async def sign_in(self, completion: Optional[Completion] = None) -> bool:
        """Authorize with Google and build the Calendar service.

        Args:
            completion: Called with ``(success, error)`` once sign-in finishes.

        Returns:
            True when signed in. False on failure if a completion was given.
        """
        try:
            creds, service = await asyncio.to_thread(self._connect)
        except Exception as exc:
            logger.error("sign_in_failed", error=f"{type(exc).__name__}: {exc}")
            if completion is None:
                raise
            await _deliver(completion, False, exc)
            return False

        self._credentials = creds
        self._service = service
        logger.info("signed_in", calendar_id=self._settings.google_calendar_id)
        await _deliver(completion, True, None)
        return True

    def sign_out(self) -> None:
        """Drop the session and the stored token."""
        self._service = None
        self._credentials = None
        Path(self._settings.google_token_file).unlink(missing_ok=True)
        logger.info("signed_out")

    # ── Events ───────────────────────────────────────────────────────

    async def fetch_events(
        self,
        completion: Optional[Completion] = None,
        *,
        time_min: Optional[dt.datetime] = None,
        max_results: Optional[int] = None,
    ) -> list[CalendarEvent]:
        """Fetch upcoming events from the configured calendar.

        Args:
            completion: Called with ``(events, error)``; ``events`` is None on error.
            time_min: Lower bound on event end time. Defaults to now.
            max_results: Cap on returned events. Defaults to settings; 0 or less
                returns nothing without calling the API.
        """
        service = self._service
        limit = self._settings.calendar_max_results if max_results is None else max_results
        lower = _rfc3339(time_min or _utcnow())
        calendar_id = self._settings.google_calendar_id

        def _list() -> list[CalendarEvent]:
            events: list[CalendarEvent] = []
            page_token: Optional[str] = None
            while len(events) < limit:
                params: dict[str, Any] = {
                    "calendarId": calendar_id,
                    "timeMin": lower,
                    "maxResults": min(limit - len(events), _PAGE_SIZE_LIMIT),
                    "singleEvents": True,
                    "orderBy": "startTime",
                }
                if page_token:
                    params["pageToken"] = page_token
                response = _execute(service.events().list(**params))
                events.extend(CalendarEvent.from_google(item) for item in response.get("items", []))
                page_token = response.get("nextPageToken")
                if not page_token:
                    break
            return events[:max(limit, 0)]

        try:
            if service is None:
                raise NotSignedInError("fetch events")
            events = await asyncio.to_thread(_list)
        except Exception as exc:
            logger.error("fetch_events_failed", error=f"{type(exc).__name__}: {exc}")
            if completion is None:
                raise
            await _deliver(completion, None, exc)
            return []

        logger.info("events_fetched", count=len(events), calendar_id=calendar_id)
        await _deliver(completion, events, None)
        return events

    async def add_event(
        self,
        summary: str,
        description: Optional[str],
        start_date: dt.datetime,
        end_date: dt.datetime,
        completion: Optional[Completion] = None,
    ) -> bool:
        """Insert a new event into the configured calendar.

        Args:
            summary: Event title; must not be blank.
            description: Optional body text. Omitted from the request when None.
            start_date: Event start.
            end_date: Event end; must be after ``start_date``.
            completion: Called with ``(success, error)``.
        """
        service = self._service
        calendar_id = self._settings.google_calendar_id

        try:
            if not summary or not summary.strip():
                raise InvalidEventError("Event summary must not be empty")
            if end_date <= start_date:
                raise InvalidEventError("Event end must be after its start")
            if service is None:
                raise NotSignedInError("add event")

            event = CalendarEvent(
                summary=summary,
                description=description,
                start=start_date,
                end=end_date,
            )
            body = event.to_google_body(self._settings.calendar_time_zone)
            created = await asyncio.to_thread(
                _execute, service.events().insert(calendarId=calendar_id, body=body),
            )
        except Exception as exc:
            logger.error("add_event_failed", summary=summary, error=f"{type(exc).__name__}: {exc}")
            if completion is None:
                raise
            await _deliver(completion, False, exc)
            return False

        logger.info("event_added", summary=summary, event_id=created.get("id", ""))
        await _deliver(completion, True, None)
        return True
