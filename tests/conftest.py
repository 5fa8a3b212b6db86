"""Shared test fixtures and utilities for gcalorg tests.

This module contains event factories and a fake Calendar client that
serves canned calendar listings and paged event results.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

from gcalorg.exceptions import CalendarServiceError
from gcalorg.types import EventRecord

CET = timezone(timedelta(hours=1))


def make_event_data(event_id: str = "evt", **fields: Any) -> Dict[str, Any]:
    """Create a raw API event with a one-hour UTC slot by default."""
    data: Dict[str, Any] = {
        "id": event_id,
        "iCalUID": f"{event_id}@google.com",
        "status": "confirmed",
        "summary": f"Event {event_id}",
        "htmlLink": f"https://www.google.com/calendar/event?eid={event_id}",
        "start": {"dateTime": "2024-03-05T10:00:00Z"},
        "end": {"dateTime": "2024-03-05T11:00:00Z"},
    }
    data.update(fields)
    return data


def make_event(event_id: str = "evt", **fields: Any) -> EventRecord:
    return EventRecord.from_api(make_event_data(event_id, **fields))


def make_attendees(count: int, **fields: Any) -> List[Dict[str, Any]]:
    return [
        {"email": f"person{i:02d}@example.com", "responseStatus": "accepted", **fields}
        for i in range(count)
    ]


class FakeCalendarClient:
    """In-memory stand-in for GoogleCalendarClient."""

    def __init__(
        self,
        calendars: Optional[List[Dict[str, Any]]] = None,
        pages: Optional[Dict[str, List[List[Dict[str, Any]]]]] = None,
    ) -> None:
        self.calendars = calendars or []
        self.pages = pages or {}
        self.event_calls: List[Tuple[str, str, str, Optional[str]]] = []
        self.fail_on: Optional[str] = None

    def list_calendars(self, max_results: int = 250) -> List[Dict[str, Any]]:
        if self.fail_on == "list_calendars":
            raise CalendarServiceError("Unable to list calendars: boom")
        return self.calendars

    def list_events(
        self,
        calendar_id: str,
        time_min: str,
        time_max: str,
        page_token: Optional[str] = None,
        max_results: int = 250,
    ) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        self.event_calls.append((calendar_id, time_min, time_max, page_token))
        if self.fail_on == calendar_id:
            raise CalendarServiceError(f"Unable to retrieve events of {calendar_id}")
        pages = self.pages.get(calendar_id, [[]])
        index = int(page_token) if page_token else 0
        next_token = str(index + 1) if index + 1 < len(pages) else None
        return pages[index], next_token


def fixed_now() -> datetime:
    return datetime(2024, 5, 31, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def fake_client() -> FakeCalendarClient:
    """Provide a fake client with two calendars and no events."""
    return FakeCalendarClient(
        calendars=[
            {"id": "work@example.com", "summary": "Work", "description": "Work stuff"},
            {"id": "home@example.com", "summary": "Home", "description": "Family"},
        ]
    )
