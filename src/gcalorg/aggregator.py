"""Builds the org agenda for a set of approved calendars."""

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from gcalorg.google_api.client import GoogleCalendarClient
from gcalorg.org import OutlineDocument, append_event
from gcalorg.types import CalendarMetadata, CalendarSpec, EventRecord

logger = logging.getLogger(__name__)

MONTHS_BEFORE = 9
MONTHS_AFTER = 12
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by whole months, letting day overflow roll into the next month.

    ``add_months(<Nov 30>, -9)`` gives March 2nd rather than clamping to
    the end of February.
    """
    year, month = divmod(moment.year * 12 + moment.month - 1 + months, 12)
    first = moment.replace(year=year, month=month + 1, day=1)
    return first + timedelta(days=moment.day - 1)


def time_window(now: datetime) -> Tuple[str, str]:
    """Fetch window around tomorrow's UTC midnight, as RFC3339 strings."""
    tomorrow = now.astimezone(timezone.utc) + timedelta(days=1)
    anchor = tomorrow.replace(hour=0, minute=0, second=0, microsecond=0)
    return (
        add_months(anchor, -MONTHS_BEFORE).strftime(_TIMESTAMP_FORMAT),
        add_months(anchor, MONTHS_AFTER).strftime(_TIMESTAMP_FORMAT),
    )


def passes_title_filters(event: EventRecord, title_filters: Iterable[str]) -> bool:
    """False if the summary contains any of the (case-sensitive) filters."""
    return not any(f in event.summary for f in title_filters)


def order_events(events: Iterable[EventRecord]) -> List[EventRecord]:
    """Sort by id and keep only the first event for each id."""
    ordered: List[EventRecord] = []
    seen = set()
    for event in sorted(events, key=lambda e: e.id):
        if event.id in seen:
            continue
        seen.add(event.id)
        ordered.append(event)
    return ordered


def calendar_heading(calendar: CalendarMetadata, tag: str) -> str:
    return (
        f"* {calendar.summary} :CALENDAR:{tag}:\n"
        ":PROPERTIES:\n"
        f":ID:         {calendar.id}\n"
        ":END:\n"
        f"\n  {calendar.description}\n\n"
    )


class CalendarAggregator:
    """Fetches, orders and filters events, and renders them into one document.

    Calendars are processed one after the other. Any service error
    propagates and aborts the whole document.
    """

    def __init__(
        self,
        client: GoogleCalendarClient,
        tz: tzinfo,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.client = client
        self.tz = tz
        self._now = now or _utcnow

    def list_calendars(self) -> Dict[str, CalendarMetadata]:
        """Calendar metadata keyed by calendar id."""
        calendars = [CalendarMetadata.from_api(c) for c in self.client.list_calendars()]
        return {c.id: c for c in calendars}

    def fetch_events(
        self, calendar_id: str, time_min: str, time_max: str
    ) -> List[EventRecord]:
        """Collect every page of events for one calendar."""
        events: List[EventRecord] = []
        page_token: Optional[str] = None
        pages = 0
        while True:
            items, page_token = self.client.list_events(
                calendar_id, time_min, time_max, page_token=page_token
            )
            events.extend(EventRecord.from_api(item) for item in items)
            pages += 1
            if not page_token:
                break
        logger.debug(
            f"Fetched {len(events)} events in {pages} pages from {calendar_id}"
        )
        return events

    def build_document(
        self,
        calendars: Sequence[CalendarSpec],
        title_filters: Sequence[str] = (),
        filetags: str = "",
    ) -> OutlineDocument:
        """Render all approved calendars into a fresh document.

        Args:
            calendars: Approved calendars in output order
            title_filters: Summary substrings of events to leave out
            filetags: Optional tag applied to the whole file

        Raises:
            CalendarServiceError: If listing calendars or any event page fails
        """
        document = OutlineDocument(filetags=filetags)
        available = self.list_calendars()
        time_min, time_max = time_window(self._now())
        logger.debug(f"Fetching events between {time_min} and {time_max}")

        for spec in calendars:
            calendar = available.get(spec.calendar_id)
            if calendar is None:
                logger.info(f"Calendar {spec.calendar_id} not available, skipping")
                continue

            document.append(calendar_heading(calendar, spec.tag))
            events = order_events(self.fetch_events(calendar.id, time_min, time_max))

            rendered = 0
            for event in events:
                if not passes_title_filters(event, title_filters):
                    logger.debug(f"Filtered out event {event.id} by title")
                    continue
                if append_event(document, event, self.tz):
                    rendered += 1
            logger.info(
                f"Rendered {rendered} of {len(events)} events from {calendar.summary}"
            )

        return document
