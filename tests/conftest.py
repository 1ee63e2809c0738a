"""Pytest fixtures for shift calendar sync tests.

This module provides test fixtures that ensure:
1. No external API calls are made (Sling, Google, Discord)
2. Isolated test environment with controlled configuration
3. In-memory doubles for the shift source, calendar and notifier
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

# Set test environment BEFORE importing application modules
os.environ.setdefault("SLING_TOKEN", "test-sling-token")
os.environ.setdefault("GOOGLE_CALENDAR_ID", "test-calendar")
os.environ.pop("DISCORD_WEBHOOK_URL", None)
os.environ.pop("TOKEN_SECRET_KEY", None)

from shift_sync.calendar.google_calendar import CalendarEvent
from shift_sync.models.shift import ShiftRecord
from shift_sync.notifications.base import Notifier
from shift_sync.providers.base import ShiftProvider


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset the settings cache before each test."""
    from shift_sync.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Doubles
# =============================================================================


def make_shift(
    start: str,
    end: str | None,
    position_id: Any = 1710948,
    shift_id: Any = None,
) -> ShiftRecord:
    """Build a ShiftRecord from ISO strings."""
    return ShiftRecord(
        id=shift_id,
        start_time=datetime.fromisoformat(start.replace("Z", "+00:00")),
        end_time=datetime.fromisoformat(end.replace("Z", "+00:00")) if end else None,
        position_id=position_id,
    )


class FakeShiftProvider(ShiftProvider):
    """Scripted shift source.

    Each response is a ShiftRecord, None, or an exception to raise. Once the
    script runs out the provider reports no further shift.
    """

    name = "fake"
    base_url = "https://shifts.invalid"

    def __init__(self, responses: list[Any] | None = None):
        super().__init__(api_token="fake-token")
        self.responses = list(responses or [])
        self.calls: list[datetime] = []

    async def get_next_shift(self, reference_time: datetime) -> ShiftRecord | None:
        self.calls.append(reference_time)
        if not self.responses:
            return None
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    def _translate_response(self, response_data: Any) -> ShiftRecord | None:
        return None


class EndlessShiftProvider(ShiftProvider):
    """Always has another 8 hour shift starting one hour after the anchor."""

    name = "endless"
    base_url = "https://shifts.invalid"

    def __init__(self):
        super().__init__(api_token="fake-token")
        self.calls: list[datetime] = []

    async def get_next_shift(self, reference_time: datetime) -> ShiftRecord | None:
        self.calls.append(reference_time)
        start = reference_time + timedelta(hours=1)
        return ShiftRecord(
            id=len(self.calls),
            start_time=start,
            end_time=start + timedelta(hours=8),
            position_id=1710948,
        )

    def _translate_response(self, response_data: Any) -> ShiftRecord | None:
        return None


class FakeCalendar:
    """In-memory stand-in for GoogleCalendarClient."""

    def __init__(self, calendar_id: str = "test-calendar"):
        self.calendar_id = calendar_id
        self.events: list[CalendarEvent] = []
        self.calls: list[str] = []
        self.inserted_bodies: list[dict[str, Any]] = []
        self.list_error: Exception | None = None
        self.insert_errors: list[Exception] = []

    def add_event(self, summary: str, start: str, end: str) -> CalendarEvent:
        event = CalendarEvent.from_api(
            {
                "id": f"existing-{len(self.events) + 1}",
                "summary": summary,
                "start": {"dateTime": start},
                "end": {"dateTime": end},
            },
            self.calendar_id,
        )
        self.events.append(event)
        return event

    def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        query: str | None = None,
        max_results: int = 250,
    ) -> list[CalendarEvent]:
        self.calls.append("list")
        if self.list_error is not None:
            raise self.list_error
        return [
            event
            for event in self.events
            if event.start < time_max
            and event.end > time_min
            and (query is None or query.lower() in event.summary.lower())
        ]

    def insert_event(self, calendar_id: str, body: dict[str, Any]) -> CalendarEvent:
        self.calls.append("insert")
        if self.insert_errors:
            raise self.insert_errors.pop(0)
        event_id = f"evt-{len(self.events) + 1}"
        event = CalendarEvent.from_api(
            {
                **body,
                "id": event_id,
                "htmlLink": f"https://calendar.google.com/event?eid={event_id}",
            },
            calendar_id,
        )
        self.inserted_bodies.append(body)
        self.events.append(event)
        return event


class RecordingNotifier(Notifier):
    """Collects messages instead of delivering them."""

    name = "recording"

    def __init__(self):
        self.messages: list[str] = []

    async def send(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def reference_time() -> datetime:
    return datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def shift_a():
    """Front Desk shift, 09:00-17:00 UTC on Jan 2."""
    return make_shift("2024-01-02T09:00Z", "2024-01-02T17:00Z", 1710948, shift_id=1)


@pytest.fixture
def shift_b():
    """Check In Desk shift, 17:00-01:00 UTC following shift A."""
    return make_shift("2024-01-02T17:00Z", "2024-01-03T01:00Z", 1710949, shift_id=2)


@pytest.fixture
def terminal_shift():
    """A record without a position, which ends the chain."""
    return make_shift("2024-01-03T09:00Z", "2024-01-03T17:00Z", None, shift_id=3)


@pytest.fixture
def fake_calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
