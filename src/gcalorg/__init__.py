"""
gcalorg

Fetches Google Calendar events into an org-mode agenda file.
"""

from .aggregator import CalendarAggregator
from .exceptions import (
    AuthenticationError,
    CalendarServiceError,
    ConfigurationError,
    GcalOrgError,
    OutputWriteError,
)
from .org import OutlineDocument, format_org_date, render_event
from .types import (
    Attachment,
    Attendee,
    CalendarMetadata,
    CalendarSpec,
    EventDateTime,
    EventRecord,
    ResponseStatus,
)

__version__ = "0.1.0"

__all__ = [
    "CalendarAggregator",
    "OutlineDocument",
    "format_org_date",
    "render_event",
    "GcalOrgError",
    "ConfigurationError",
    "AuthenticationError",
    "CalendarServiceError",
    "OutputWriteError",
    "Attachment",
    "Attendee",
    "CalendarMetadata",
    "CalendarSpec",
    "EventDateTime",
    "EventRecord",
    "ResponseStatus",
]
