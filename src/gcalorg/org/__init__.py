"""Org-mode rendering of calendar events."""

from .attendees import (
    MAX_LISTED_ATTENDEES,
    attendee_sort_key,
    is_self_declined,
    render_attendee,
    render_attendees,
    status_glyph,
)
from .dates import format_org_date
from .document import HEADER, OutlineDocument
from .escape import escape_org
from .event import append_event, render_event, should_render

__all__ = [
    "HEADER",
    "MAX_LISTED_ATTENDEES",
    "OutlineDocument",
    "append_event",
    "attendee_sort_key",
    "escape_org",
    "format_org_date",
    "is_self_declined",
    "render_attendee",
    "render_attendees",
    "render_event",
    "should_render",
    "status_glyph",
]
