"""Google API authentication backed by a per-profile token file."""

import logging
import os
from typing import Any, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow  # type: ignore[import-untyped]
from googleapiclient.discovery import build  # type: ignore[import-untyped]

from gcalorg.config import get_current_config
from gcalorg.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
]


class GoogleAuthManager:
    """Loads, refreshes and stores OAuth credentials for one token file."""

    def __init__(
        self, token_file: str, credentials_file: Optional[str] = None
    ) -> None:
        self.token_file = token_file
        self.credentials_file = (
            credentials_file or get_current_config().google_credentials_file
        )
        self._creds: Optional[Credentials] = None
        self._calendar_service: Any = None
        self._authenticate()

    def _scopes_match(
        self, stored_scopes: list[str], required_scopes: list[str]
    ) -> bool:
        """Check if stored scopes contain all required scopes."""
        return set(required_scopes).issubset(set(stored_scopes))

    def _load_credentials(self) -> Optional[Credentials]:
        if not os.path.exists(self.token_file):
            logger.debug(f"No token file at {self.token_file}")
            return None

        try:
            creds = Credentials.from_authorized_user_file(self.token_file)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable token file {self.token_file}: {e}")
            return None

        stored_scopes = list(creds.scopes) if creds.scopes else []
        if not self._scopes_match(stored_scopes, _SCOPES):
            logger.info(
                f"Stored scopes {stored_scopes} don't match required scopes {_SCOPES}. "
                "Forcing reauth."
            )
            return None
        return creds

    def _store_credentials(self, creds: Credentials) -> None:
        """Save credentials to the token file, readable by the owner only."""
        directory = os.path.dirname(self.token_file)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            fd = os.open(self.token_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as token:
                token.write(creds.to_json())  # type: ignore[no-untyped-call]
        except OSError as e:
            raise AuthenticationError(
                f"Unable to store token in {self.token_file}: {e}"
            ) from e

    def _authenticate(self) -> None:
        """Authenticate with the Calendar API."""
        self._creds = self._load_credentials()
        if self._creds and self._creds.valid:
            return

        if self._creds and self._creds.expired and self._creds.refresh_token:
            try:
                self._creds.refresh(Request())  # type: ignore[no-untyped-call]
            except GoogleAuthError as e:
                raise AuthenticationError(
                    f"Unable to refresh token in {self.token_file}: {e}"
                ) from e
            self._store_credentials(self._creds)
            return

        # Fall back to the interactive OAuth flow
        if not os.path.exists(self.credentials_file):
            raise AuthenticationError(
                f"No usable token in {self.token_file} and no OAuth client "
                f"file at {self.credentials_file}. "
                "Set GOOGLE_CREDENTIALS_FILE to authorize a new token."
            )
        logger.info(f"Authorizing new token for {self.token_file}")
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                self.credentials_file, _SCOPES
            )
        except ValueError as e:
            raise AuthenticationError(
                f"Invalid OAuth client file {self.credentials_file}: {e}"
            ) from e
        self._creds = flow.run_local_server(port=0)
        self._store_credentials(self._creds)

    def is_authenticated(self) -> bool:
        return self._creds is not None and self._creds.valid

    def get_calendar_service(self) -> Any:
        """Get Calendar service (cached)."""
        if self._calendar_service is None:
            self._calendar_service = build(
                "calendar", "v3", credentials=self._creds, cache_discovery=False
            )
        return self._calendar_service
