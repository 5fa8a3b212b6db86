"""Rendering of a single calendar event as an org-mode entry."""

import logging
from datetime import tzinfo
from typing import List

from gcalorg.types import EventPerson, EventRecord, EventStatus

from .attendees import is_self_declined, mail_link, render_attendees
from .dates import format_org_date
from .document import OutlineDocument
from .escape import escape_org

logger = logging.getLogger(__name__)

_ANNOTATED_STATUSES = {EventStatus.TENTATIVE.value, EventStatus.CANCELLED.value}


def should_render(event: EventRecord) -> bool:
    """False when the authenticated user declined the event."""
    return not any(is_self_declined(a) for a in event.attendees)


def _heading(event: EventRecord) -> str:
    prefix = f"({event.status}) " if event.status in _ANNOTATED_STATUSES else ""
    summary = escape_org(event.summary) or "busy"
    return f"** {prefix}{summary}\n"


def _person_property(name: str, person: EventPerson) -> str:
    return f":{name}: {mail_link(person.email, person.display_name)}\n"


def _properties(event: EventRecord) -> str:
    lines: List[str] = [
        ":PROPERTIES:\n",
        f":ID:       {event.stable_id}\n",
        f":GCALLINK: {event.html_link}\n",
    ]
    if event.creator is not None:
        lines.append(_person_property("CREATOR", event.creator))
    if event.organizer is not None:
        lines.append(_person_property("ORGANIZER", event.organizer))
    lines.append(":END:\n\n")
    return "".join(lines)


def _attachments(event: EventRecord) -> str:
    entries = "".join(
        f"- [[{a.file_url}][{escape_org(a.title)}]]\n" for a in event.attachments
    )
    if not entries:
        return ""
    return "\nAttachments:\n" + entries


def render_event(event: EventRecord, tz: tzinfo) -> str:
    """Render ``event`` as a level-two org entry.

    The entry is made of the heading, a property block, the date range,
    the attendee list, the description and the attachment list, in that
    order. Suppression is not applied here, see :func:`should_render`.
    """
    return "".join(
        [
            _heading(event),
            _properties(event),
            format_org_date(event.start, event.end, tz) + "\n",
            render_attendees(event.attendees),
            escape_org(f"\n{event.description}\n") + "\n",
            _attachments(event),
        ]
    )


def append_event(document: OutlineDocument, event: EventRecord, tz: tzinfo) -> bool:
    """Append the entry for ``event`` unless it is suppressed.

    Returns:
        True if an entry was appended
    """
    if not should_render(event):
        logger.debug(f"Skipping self-declined event {event.id}")
        return False
    document.append(render_event(event, tz))
    return True
