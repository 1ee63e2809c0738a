"""Google Calendar API client.

Provides the two calls the shift sync needs:
- List events overlapping a time window, filtered by free text
- Insert an event

## API Documentation

https://developers.google.com/calendar/api/v3/reference

## Authentication

Wraps an authorized `google.oauth2.credentials.Credentials`. Expired access
tokens are refreshed by google-auth on demand as long as the credentials
carry a refresh token.

## Rate Limits

Google Calendar API has quotas:
- 1,000,000 queries per day (default)
- 500 queries per 100 seconds per user

Callers throttle between shifts to stay well under the per-user quota.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from shift_sync.models.shift import isoformat_utc, parse_instant

logger = logging.getLogger(__name__)


@dataclass
class CalendarEvent:
    """A calendar event."""

    id: str
    calendar_id: str
    summary: str
    start: datetime | None = None
    end: datetime | None = None
    start_date: str | None = None  # For all-day events (YYYY-MM-DD)
    end_date: str | None = None
    time_zone: str | None = None
    is_all_day: bool = False
    status: str = "confirmed"  # confirmed, tentative, cancelled
    html_link: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any], calendar_id: str) -> CalendarEvent:
        """Create from Google Calendar API response."""
        start_data = data.get("start", {})
        end_data = data.get("end", {})

        is_all_day = "date" in start_data

        return cls(
            id=data["id"],
            calendar_id=calendar_id,
            summary=data.get("summary", "(No title)"),
            start=None if is_all_day else parse_instant(start_data.get("dateTime")),
            end=None if is_all_day else parse_instant(end_data.get("dateTime")),
            start_date=start_data.get("date") if is_all_day else None,
            end_date=end_data.get("date") if is_all_day else None,
            time_zone=start_data.get("timeZone"),
            is_all_day=is_all_day,
            status=data.get("status", "confirmed"),
            html_link=data.get("htmlLink"),
            raw_data=data,
        )


class GoogleCalendarClient:
    """Client for Google Calendar API.

    The client is blocking; async callers should run its methods in a
    worker thread.

    Example:
        ```python
        client = GoogleCalendarClient(credentials)

        # Look for existing events
        events = client.list_events(calendar_id, time_min, time_max, query="Front Desk")

        # Create an event
        event = client.insert_event(calendar_id, draft.to_api_body())
        ```
    """

    def __init__(self, credentials: Credentials, service: Any = None):
        """Initialize the client.

        Args:
            credentials: Authorized Google OAuth credentials
            service: Prebuilt Calendar v3 service (built from credentials if omitted)
        """
        self._credentials = credentials
        self._service = service or build(
            "calendar", "v3", credentials=credentials, cache_discovery=False
        )

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        query: str | None = None,
        max_results: int = 250,
    ) -> list[CalendarEvent]:
        """List events overlapping a time window.

        Args:
            calendar_id: Calendar ID (use 'primary' for primary calendar)
            time_min: Lower bound (exclusive) for an event's end time
            time_max: Upper bound (exclusive) for an event's start time
            query: Free text search terms
            max_results: Page size

        Returns:
            Matching events, cancelled events excluded
        """
        events = []
        page_token = None

        params: dict[str, Any] = {
            "calendarId": calendar_id,
            "timeMin": isoformat_utc(time_min),
            "timeMax": isoformat_utc(time_max),
            "maxResults": max_results,
            "singleEvents": True,  # Expand recurring events
            "orderBy": "startTime",
        }
        if query:
            params["q"] = query

        while True:
            if page_token:
                params["pageToken"] = page_token

            result = self._service.events().list(**params).execute()

            for item in result.get("items", []):
                if item.get("status") == "cancelled":
                    continue
                events.append(CalendarEvent.from_api(item, calendar_id))

            page_token = result.get("nextPageToken")
            if not page_token:
                break

        return events

    def insert_event(self, calendar_id: str, body: dict[str, Any]) -> CalendarEvent:
        """Insert a new event.

        Args:
            calendar_id: Calendar ID
            body: Event resource in API format

        Returns:
            The created CalendarEvent

        Raises:
            googleapiclient.errors.HttpError: If the API rejects the insert
        """
        result = (
            self._service.events()
            .insert(calendarId=calendar_id, body=body)
            .execute()
        )
        event = CalendarEvent.from_api(result, calendar_id)
        logger.debug(f"Inserted event {event.id} into {calendar_id}")
        return event
