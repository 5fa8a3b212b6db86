"""Google Calendar API integration."""

from .auth import GoogleAuthManager
from .client import GoogleCalendarClient

__all__ = [
    "GoogleAuthManager",
    "GoogleCalendarClient",
]
