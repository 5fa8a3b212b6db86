"""Typed views of the Google Calendar API resources gcalorg reads."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResponseStatus(str, Enum):
    """An attendee's answer to an invitation."""

    NEEDS_ACTION = "needsAction"
    DECLINED = "declined"
    TENTATIVE = "tentative"
    ACCEPTED = "accepted"
    UNKNOWN = "unknown"


class EventStatus(str, Enum):
    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CANCELLED = "cancelled"


class _ApiModel(BaseModel):
    """Immutable model populated from camelCase API payloads."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class CalendarSpec(_ApiModel):
    """An approved calendar and the tag its entries are grouped under."""

    tag: str = Field(description="Upper-cased tag used in the calendar heading")
    calendar_id: str = Field(description="Google calendar identifier")


class CalendarMetadata(_ApiModel):
    """A calendar-list entry as returned by ``calendarList.list``."""

    id: str = Field(description="Calendar identifier")
    summary: str = Field("", description="Display title")
    description: str = Field("", description="Calendar description")

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CalendarMetadata":
        return cls.model_validate(data)


class EventDateTime(_ApiModel):
    """Start or end of an event.

    All-day events carry ``date`` (``YYYY-MM-DD``); timed events carry
    ``dateTime`` (RFC3339 with offset). Values are kept as raw strings so
    that malformed timestamps reach the formatter untouched.
    """

    date: Optional[str] = None
    date_time: Optional[str] = Field(None, alias="dateTime")
    time_zone: Optional[str] = Field(None, alias="timeZone")

    def is_all_day(self) -> bool:
        return bool(self.date)


class EventPerson(_ApiModel):
    """Creator or organizer of an event."""

    email: str = ""
    display_name: str = Field("", alias="displayName")


class Attendee(_ApiModel):
    id: str = ""
    email: str = ""
    display_name: str = Field("", alias="displayName")
    response_status: ResponseStatus = Field(
        ResponseStatus.UNKNOWN, alias="responseStatus"
    )
    is_self: bool = Field(False, alias="self")

    @field_validator("response_status", mode="before")
    @classmethod
    def coerce_response_status(cls, v: Any) -> ResponseStatus:
        """Map missing or unrecognised statuses to ``UNKNOWN``."""
        try:
            return ResponseStatus(v)
        except ValueError:
            return ResponseStatus.UNKNOWN


class Attachment(_ApiModel):
    title: str = ""
    file_url: str = Field("", alias="fileUrl")


class EventRecord(_ApiModel):
    """A single (already expanded) calendar event."""

    id: str = Field(description="Event identifier, unique within a calendar")
    ical_uid: str = Field("", alias="iCalUID")
    status: str = Field(EventStatus.CONFIRMED.value, description="Event status")
    summary: str = ""
    start: Optional[EventDateTime] = None
    end: Optional[EventDateTime] = None
    creator: Optional[EventPerson] = None
    organizer: Optional[EventPerson] = None
    attendees: List[Attendee] = Field(default_factory=list)
    description: str = ""
    attachments: List[Attachment] = Field(default_factory=list)
    html_link: str = Field("", alias="htmlLink")

    @field_validator("attendees", "attachments", mode="before")
    @classmethod
    def drop_null_entries(cls, v: Any) -> Any:
        if v is None:
            return []
        return [item for item in v if item is not None]

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "EventRecord":
        return cls.model_validate(data)

    @property
    def stable_id(self) -> str:
        """Identifier written to the entry's property block."""
        return self.ical_uid or self.id
