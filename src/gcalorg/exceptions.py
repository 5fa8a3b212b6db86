"""Exceptions raised by gcalorg."""


class GcalOrgError(Exception):
    """Base class for errors that abort a run."""


class ConfigurationError(GcalOrgError):
    """Exception raised when a calendar profile is missing or invalid."""


class AuthenticationError(GcalOrgError):
    """Exception raised when Google credentials cannot be obtained."""


class CalendarServiceError(GcalOrgError):
    """Exception raised when listing calendars or fetching events fails."""


class OutputWriteError(GcalOrgError):
    """Exception raised when the agenda cannot be written."""

    def __init__(self, path: str, reason: Exception) -> None:
        super().__init__(f"Error writing to {path} - {reason}")
        self.path = path
        self.reason = reason
