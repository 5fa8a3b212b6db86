"""Attendee lines of an org agenda entry."""

from typing import Iterable, List

from gcalorg.types import Attendee, ResponseStatus

from .escape import escape_org

MAX_LISTED_ATTENDEES = 20
MANY_ATTENDEES_LINE = "... Many\n"

_STATUS_GLYPHS = {
    ResponseStatus.DECLINED: "✗",
    ResponseStatus.TENTATIVE: "☐",
    ResponseStatus.ACCEPTED: "✓",
}


def status_glyph(status: ResponseStatus) -> str:
    """Single-character marker for a response status (blank if unanswered)."""
    return _STATUS_GLYPHS.get(status, " ")


def attendee_sort_key(attendee: Attendee) -> str:
    """Ordering key: id, then email, then escaped display name."""
    if attendee.id:
        return attendee.id
    if attendee.email:
        return attendee.email
    if attendee.display_name:
        return escape_org(attendee.display_name)
    return ""


def is_self_declined(attendee: Attendee) -> bool:
    """True when the authenticated user declined the event."""
    return attendee.is_self and attendee.response_status == ResponseStatus.DECLINED


def mail_link(email: str, display_name: str) -> str:
    """Org mailto link labelled with the escaped name, or the email."""
    label = escape_org(display_name) or email
    return f"[[mailto:{email}][{label}]]"


def render_attendee(attendee: Attendee) -> str:
    glyph = status_glyph(attendee.response_status)
    return f" {glyph} {mail_link(attendee.email, attendee.display_name)}\n"


def render_attendees(attendees: Iterable[Attendee]) -> str:
    """Render the ``Attendees:`` block, or an empty string without attendees.

    Events with more than ``MAX_LISTED_ATTENDEES`` attendees get a single
    placeholder line instead of the full list.
    """
    ordered: List[Attendee] = sorted(attendees, key=attendee_sort_key)
    if not ordered:
        return ""
    if len(ordered) > MAX_LISTED_ATTENDEES:
        return "Attendees:\n" + MANY_ATTENDEES_LINE
    return "Attendees:\n" + "".join(render_attendee(a) for a in ordered)
