"""Thin synchronous client for the Calendar v3 API."""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import httplib2  # type: ignore[import-untyped]
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError  # type: ignore[import-untyped]

from gcalorg.exceptions import CalendarServiceError

from .auth import GoogleAuthManager

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 250


class GoogleCalendarClient:
    """Read-only access to calendar listings and events."""

    def __init__(self, auth_manager: GoogleAuthManager):
        self.auth_manager = auth_manager

    @property
    def _calendar(self) -> Any:
        """Get Calendar service instance."""
        return self.auth_manager.get_calendar_service()

    def _execute(self, what: str, request: Callable[[], Any]) -> Dict[str, Any]:
        try:
            return dict(request().execute())
        except (HttpError, httplib2.HttpLib2Error, GoogleAuthError, OSError) as e:
            raise CalendarServiceError(f"Unable to {what}: {e}") from e

    def list_calendars(self, max_results: int = MAX_PAGE_SIZE) -> List[Dict[str, Any]]:
        """List the visible calendars of the authenticated user."""
        result = self._execute(
            "list calendars",
            lambda: self._calendar.calendarList().list(
                showHidden=False, showDeleted=False, maxResults=max_results
            ),
        )
        items = result.get("items", [])
        logger.debug(f"Calendar list returned {len(items)} calendars")
        return items

    def list_events(
        self,
        calendar_id: str,
        time_min: str,
        time_max: str,
        page_token: Optional[str] = None,
        max_results: int = MAX_PAGE_SIZE,
    ) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        """Fetch one page of expanded events in ``[time_min, time_max)``.

        Args:
            calendar_id: Calendar to read
            time_min: RFC3339 lower bound
            time_max: RFC3339 upper bound
            page_token: Continuation token from a previous page
            max_results: Page size

        Returns:
            The page's events and the next page token, or None on the last page
        """
        kwargs: Dict[str, Any] = {
            "calendarId": calendar_id,
            "showDeleted": False,
            "singleEvents": True,
            "timeMin": time_min,
            "timeMax": time_max,
            "maxResults": max_results,
        }
        if page_token:
            kwargs["pageToken"] = page_token

        result = self._execute(
            f"retrieve events of {calendar_id}",
            lambda: self._calendar.events().list(**kwargs),
        )
        items = result.get("items", [])
        next_token = result.get("nextPageToken") or None
        logger.debug(
            f"Calendar API returned {len(items)} events for {calendar_id}, "
            f"next_token: {bool(next_token)}"
        )
        return items, next_token
