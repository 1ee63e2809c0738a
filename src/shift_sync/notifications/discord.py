"""Discord webhook notifier.

## Endpoint
- POST <webhook url> with JSON body `{"content": "<message>"}`
- Success: 204 No Content (200 when `?wait=true`)

## Limits
- Message content is capped at 2000 characters
- Webhooks are rate limited per channel; a failed post is dropped

Timeouts and network errors are retried a few times with backoff before the
message is given up on.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from shift_sync.notifications.base import Notifier

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 2000


def truncate_message(message: str, limit: int = MAX_CONTENT_LENGTH) -> str:
    """Trim a message to Discord's content limit."""
    if len(message) <= limit:
        return message
    return message[: limit - 3] + "..."


class DiscordNotifier(Notifier):
    """Post status messages to a Discord webhook.

    With no webhook URL configured, messages are only logged.

    Example:
        ```python
        notifier = DiscordNotifier(settings.discord_webhook_url)
        await notifier.send("Running the job")
        await notifier.aclose()
        ```
    """

    name = "discord"

    def __init__(
        self,
        webhook_url: str | None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the notifier.

        Args:
            webhook_url: Discord webhook URL, or None to disable delivery
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    async def __aenter__(self) -> DiscordNotifier:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            )
        return self._client

    async def send(self, message: str) -> None:
        """Post a message; failures are logged, never raised."""
        if not self.is_configured:
            logger.debug(f"Notification (no webhook configured): {message}")
            return

        try:
            await self._post(truncate_message(message))
        except Exception as e:
            logger.error(f"Error sending Discord message: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    async def _post(self, content: str) -> None:
        response = await self._get_client().post(
            self.webhook_url,
            json={"content": content},
        )
        response.raise_for_status()
