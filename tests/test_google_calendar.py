"""Tests for the Google Calendar client wrapper."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from shift_sync.calendar.google_calendar import CalendarEvent, GoogleCalendarClient

START = datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc)
END = datetime(2024, 1, 2, 17, 0, tzinfo=timezone.utc)


def api_event(event_id: str, summary: str = "Front Desk", **extra) -> dict:
    return {
        "id": event_id,
        "summary": summary,
        "start": {"dateTime": "2024-01-02T04:00:00-05:00", "timeZone": "America/New_York"},
        "end": {"dateTime": "2024-01-02T12:00:00-05:00", "timeZone": "America/New_York"},
        "htmlLink": f"https://calendar.google.com/event?eid={event_id}",
        **extra,
    }


@pytest.fixture
def service() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(service) -> GoogleCalendarClient:
    return GoogleCalendarClient(credentials=MagicMock(), service=service)


class TestCalendarEvent:
    """Tests for CalendarEvent parsing."""

    def test_timed_event(self):
        event = CalendarEvent.from_api(api_event("a"), "primary")

        assert event.start == START
        assert event.end == END
        assert event.time_zone == "America/New_York"
        assert event.is_all_day is False
        assert event.html_link.endswith("eid=a")

    def test_all_day_event(self):
        data = {
            "id": "b",
            "start": {"date": "2024-01-02"},
            "end": {"date": "2024-01-03"},
        }
        event = CalendarEvent.from_api(data, "primary")

        assert event.is_all_day is True
        assert event.start is None
        assert event.start_date == "2024-01-02"
        assert event.summary == "(No title)"


class TestListEvents:
    """Tests for GoogleCalendarClient.list_events."""

    def test_query_parameters(self, client, service):
        """Test the window and free-text filter are sent."""
        service.events.return_value.list.return_value.execute.return_value = {
            "items": []
        }

        client.list_events("cal-1", START, END, query="Front Desk")

        service.events.return_value.list.assert_called_once_with(
            calendarId="cal-1",
            timeMin="2024-01-02T09:00:00.000Z",
            timeMax="2024-01-02T17:00:00.000Z",
            maxResults=250,
            singleEvents=True,
            orderBy="startTime",
            q="Front Desk",
        )

    def test_pagination_and_cancelled(self, client, service):
        """Test all pages are read and cancelled events dropped."""
        service.events.return_value.list.return_value.execute.side_effect = [
            {"items": [api_event("a")], "nextPageToken": "page-2"},
            {"items": [api_event("b"), api_event("c", status="cancelled")]},
        ]

        events = client.list_events("cal-1", START, END)

        assert [event.id for event in events] == ["a", "b"]
        second_call = service.events.return_value.list.call_args_list[1]
        assert second_call.kwargs["pageToken"] == "page-2"
        assert "q" not in second_call.kwargs


class TestInsertEvent:
    """Tests for GoogleCalendarClient.insert_event."""

    def test_insert(self, client, service):
        body = {"summary": "Front Desk"}
        service.events.return_value.insert.return_value.execute.return_value = (
            api_event("new")
        )

        event = client.insert_event("cal-1", body)

        service.events.return_value.insert.assert_called_once_with(
            calendarId="cal-1", body=body
        )
        assert event.id == "new"
        assert event.calendar_id == "cal-1"
        assert event.html_link == "https://calendar.google.com/event?eid=new"

    def test_errors_propagate(self, client, service):
        service.events.return_value.insert.return_value.execute.side_effect = (
            RuntimeError("forbidden")
        )

        with pytest.raises(RuntimeError):
            client.insert_event("cal-1", {})
