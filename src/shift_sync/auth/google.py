"""Google OAuth credentials for the calendar client.

Implements the installed-app flow: the user grants access once in a
browser, the resulting authorized-user token is saved to disk, and later
runs load it from there.

## Required Setup

1. Create a project in Google Cloud Console
2. Enable Google Calendar API
3. Create OAuth 2.0 credentials (Desktop app)
4. Download the client secrets to GOOGLE_CREDENTIALS_PATH

## Token File

GOOGLE_TOKEN_PATH holds the JSON written by `Credentials.to_json()`
(Fernet-encrypted when TOKEN_SECRET_KEY is set). It is created after the
first successful consent and refreshed in place when the access token has
expired.

## Scopes Used

- https://www.googleapis.com/auth/calendar.readonly: Read calendar data
- https://www.googleapis.com/auth/calendar.events: Create events
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from shift_sync.auth.encryption import TokenCipher
from shift_sync.config import Settings, get_settings
from shift_sync.notifications.base import Notifier

logger = logging.getLogger(__name__)

AUTHORIZATION_PROMPT = "Authorize this app by visiting this url: {url}"
AUTHORIZATION_SUCCESS = "Authentication successful! Please return to the console."


class CredentialError(Exception):
    """Raised when credentials cannot be obtained."""

    pass


@dataclass
class ConsentRequest:
    """A consent flow whose authorization URL has been issued."""

    flow: InstalledAppFlow
    url: str
    state: str


class GoogleCredentialProvider:
    """Load, obtain and persist Google OAuth credentials.

    Example:
        ```python
        provider = GoogleCredentialProvider(settings, notifier)
        credentials = await provider.authorize()
        calendar = GoogleCalendarClient(credentials)
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
    ):
        """Initialize the provider.

        Args:
            settings: Application settings (defaults to cached settings)
            notifier: Receives authorization status messages
        """
        self.settings = settings or get_settings()
        self.notifier = notifier
        self.cipher = TokenCipher.from_settings(self.settings)

    @property
    def token_path(self) -> Path:
        return self.settings.google_token_path

    @property
    def credentials_path(self) -> Path:
        return self.settings.google_credentials_path

    @property
    def scopes(self) -> list[str]:
        return list(self.settings.google_calendar_scopes)

    @property
    def redirect_uri(self) -> str:
        return f"http://localhost:{self.settings.oauth_callback_port}/"

    def load_saved(self) -> Credentials | None:
        """Load saved credentials, refreshing them if expired.

        Returns:
            Valid credentials, or None if no usable token is saved
        """
        if not self.token_path.exists():
            return None

        try:
            content = self.token_path.read_text(encoding="utf-8")
            if self.cipher is not None:
                content = self.cipher.decrypt(content)
            info = json.loads(content)
            credentials = Credentials.from_authorized_user_info(info, self.scopes)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load saved token from {self.token_path}: {e}")
            return None

        if credentials.valid:
            return credentials

        if not credentials.refresh_token:
            logger.warning("Saved token has expired and cannot be refreshed")
            return None

        try:
            credentials.refresh(Request())
        except GoogleAuthError as e:
            logger.warning(f"Saved token could not be refreshed: {e}")
            return None

        self.save(credentials)
        return credentials

    def save(self, credentials: Credentials) -> None:
        """Persist credentials to the token file."""
        content = credentials.to_json()
        if self.cipher is not None:
            content = self.cipher.encrypt(content)

        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        self.token_path.write_text(content, encoding="utf-8")
        self.token_path.chmod(0o600)

    def start_consent(self) -> ConsentRequest:
        """Load the client secrets and issue the authorization URL.

        Raises:
            CredentialError: If the client secrets file is missing or invalid
        """
        if not self.credentials_path.exists():
            raise CredentialError(
                f"OAuth client secrets not found at {self.credentials_path}"
            )

        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                str(self.credentials_path),
                scopes=self.scopes,
            )
        except ValueError as e:
            raise CredentialError(f"Invalid OAuth client secrets: {e}") from e

        flow.redirect_uri = self.redirect_uri
        url, state = flow.authorization_url(access_type="offline", prompt="consent")
        return ConsentRequest(flow=flow, url=url, state=state)

    def complete_consent(self, request: ConsentRequest) -> Credentials:
        """Wait on the local callback server for the user to grant access.

        The flow re-issues the same URL (same state) so the callback's state
        check matches the link that was sent out.
        """
        return request.flow.run_local_server(
            port=self.settings.oauth_callback_port,
            authorization_prompt_message=AUTHORIZATION_PROMPT,
            success_message=AUTHORIZATION_SUCCESS,
            open_browser=True,
            access_type="offline",
            prompt="consent",
            state=request.state,
        )

    async def authorize(self) -> Credentials:
        """Return authorized credentials, running the consent flow if needed."""
        logger.info("Authorizing...")

        credentials = await asyncio.to_thread(self.load_saved)
        if credentials is not None:
            logger.info("Token loaded from file")
            await self._notify("Authorized to access Google Calendar, token loaded from file")
            return credentials

        request = self.start_consent()
        logger.info(AUTHORIZATION_PROMPT.format(url=request.url))
        await self._notify(AUTHORIZATION_PROMPT.format(url=request.url))

        credentials = await asyncio.to_thread(self.complete_consent, request)
        logger.info("Tokens acquired.")

        self.save(credentials)
        logger.info("Token saved to file")
        await self._notify("Authorized to access Google Calendar, token saved to file")
        return credentials

    async def _notify(self, message: str) -> None:
        if self.notifier is not None:
            await self.notifier.send(message)
