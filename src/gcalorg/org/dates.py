"""Org-mode timestamps for calendar event ranges."""

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from gcalorg.types import EventDateTime

logger = logging.getLogger(__name__)

# Org timestamps use English day names regardless of locale.
_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _parse_date(value: Optional[str]) -> date:
    try:
        return date.fromisoformat(value or "")
    except ValueError:
        logger.debug(f"Unparseable all-day date {value!r}, using zero date")
        return date.min


def _parse_datetime(value: Optional[str], tz: tzinfo) -> datetime:
    """Parse an RFC3339 timestamp into ``tz``.

    Timestamps without an offset are taken to be in ``tz`` already.
    """
    try:
        parsed = datetime.fromisoformat((value or "").replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=tz)
        return parsed.astimezone(tz)
    except (ValueError, OverflowError):
        logger.debug(f"Unparseable timestamp {value!r}, using zero time")
        return datetime.min.replace(tzinfo=tz)


def _format_moment(dt: datetime) -> str:
    return f"{dt.date().isoformat()} {_DAY_NAMES[dt.weekday()]} {dt:%H:%M}"


def format_org_date(
    start: Optional[EventDateTime], end: Optional[EventDateTime], tz: tzinfo
) -> str:
    """Render an event's start/end as an org timestamp or range.

    Args:
        start: Event start; an empty string is returned when missing
        end: Event end, optional
        tz: Timezone timed events are shown in

    Returns:
        ``<2024-01-15>``, ``<2024-01-15>--<2024-01-17>``,
        ``<2024-01-15 Mon 10:00-11:00>`` or
        ``<2024-01-15 Mon 22:00>--<2024-01-16 Tue 01:00>``
    """
    if start is None:
        return ""

    if start.is_all_day():
        first = _parse_date(start.date)
        result = f"<{first.isoformat()}>"
        if end is None or not end.date:
            return result

        # The service's end date is exclusive.
        last = _parse_date(end.date)
        if last > date.min:
            last -= timedelta(days=1)
        if last == first:
            return result
        return f"{result}--<{last.isoformat()}>"

    begins = _parse_datetime(start.date_time, tz)
    result = f"<{_format_moment(begins)}"
    if end is None:
        return result + ">"

    ends = _parse_datetime(end.date_time, tz)
    if ends.date() != begins.date():
        return f"{result}>--<{_format_moment(ends)}>"
    return f"{result}-{ends:%H:%M}>"
