"""Data models for Google Calendar events."""

from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel


def _parse_when(when: dict[str, Any]) -> tuple[dt.datetime, bool]:
    """Parse a Calendar API ``start``/``end`` object into (datetime, all_day)."""
    if "dateTime" in when:
        return dt.datetime.fromisoformat(when["dateTime"].replace("Z", "+00:00")), False
    if "date" in when:
        return dt.datetime.fromisoformat(when["date"]), True
    raise ValueError(f"Event time has neither dateTime nor date: {when!r}")


class CalendarEvent(BaseModel):
    """A single event as returned by the Calendar API."""

    id: str = ""
    summary: str = ""
    description: Optional[str] = None
    location: str = ""
    start: dt.datetime
    end: dt.datetime
    all_day: bool = False
    status: str = "confirmed"
    html_link: str = ""
    organizer: str = ""

    @property
    def duration_minutes(self) -> int:
        """Event duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    @classmethod
    def from_google(cls, item: dict[str, Any]) -> CalendarEvent:
        """Build an event from a raw ``events.list`` item."""
        start, all_day = _parse_when(item.get("start", {}))
        end, _ = _parse_when(item.get("end", {}))
        return cls(
            id=item.get("id", ""),
            summary=item.get("summary", ""),
            description=item.get("description"),
            location=item.get("location", ""),
            start=start,
            end=end,
            all_day=all_day,
            status=item.get("status", "confirmed"),
            html_link=item.get("htmlLink", ""),
            organizer=item.get("organizer", {}).get("email", ""),
        )

    def to_google_body(self, time_zone: str = "UTC") -> dict[str, Any]:
        """Request body for ``events.insert``."""
        body: dict[str, Any] = {
            "summary": self.summary,
            "start": {"dateTime": self.start.isoformat(), "timeZone": time_zone},
            "end": {"dateTime": self.end.isoformat(), "timeZone": time_zone},
        }
        if self.description is not None:
            body["description"] = self.description
        if self.location:
            body["location"] = self.location
        return body
