"""Calendar integration module.

Writes upcoming shifts to Google Calendar, one event per shift.

## Google Calendar API

Uses the Google Calendar API v3:
- https://developers.google.com/calendar/api/v3/reference

## Event Processing

1. Build an event draft from the shift and its position label
2. Look for an existing event with the same label in the same window
3. Insert the draft only if nothing matched
"""

from shift_sync.calendar.google_calendar import (
    GoogleCalendarClient,
    CalendarEvent,
)
from shift_sync.calendar.sync import EventSyncer

__all__ = [
    "GoogleCalendarClient",
    "CalendarEvent",
    "EventSyncer",
]
