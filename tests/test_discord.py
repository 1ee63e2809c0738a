"""Tests for Discord notifications."""

import json

import httpx
import pytest

from shift_sync.notifications.discord import (
    MAX_CONTENT_LENGTH,
    DiscordNotifier,
    truncate_message,
)

WEBHOOK_URL = "https://discord.com/api/webhooks/123/abc"


class TestDiscordNotifier:
    """Tests for DiscordNotifier."""

    @pytest.mark.asyncio
    async def test_posts_content(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        async with DiscordNotifier(
            WEBHOOK_URL, transport=httpx.MockTransport(handler)
        ) as notifier:
            await notifier.send("Running the job")

        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert str(seen[0].url) == WEBHOOK_URL
        assert json.loads(seen[0].content) == {"content": "Running the job"}

    @pytest.mark.asyncio
    async def test_without_webhook(self):
        """Test nothing is posted when no webhook is configured."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        notifier = DiscordNotifier(None, transport=httpx.MockTransport(handler))
        await notifier.send("hello")
        await notifier.aclose()

        assert notifier.is_configured is False
        assert seen == []

    @pytest.mark.asyncio
    async def test_http_error_is_swallowed(self, caplog):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "Cannot send an empty message"})

        async with DiscordNotifier(
            WEBHOOK_URL, transport=httpx.MockTransport(handler)
        ) as notifier:
            await notifier.send("hello")

        assert "Error sending Discord message" in caplog.text

    @pytest.mark.asyncio
    async def test_long_message_is_truncated(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        async with DiscordNotifier(
            WEBHOOK_URL, transport=httpx.MockTransport(handler)
        ) as notifier:
            await notifier.send("x" * 5000)

        content = json.loads(seen[0].content)["content"]
        assert len(content) == MAX_CONTENT_LENGTH
        assert content.endswith("...")


class TestTruncateMessage:
    def test_short_message_unchanged(self):
        assert truncate_message("ok") == "ok"

    def test_exact_limit_unchanged(self):
        message = "y" * MAX_CONTENT_LENGTH
        assert truncate_message(message) == message
