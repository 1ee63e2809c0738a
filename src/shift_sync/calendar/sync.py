"""Shift to calendar event reconciliation.

## Sync Process (per shift)

1. Build the event draft (label as title, one popup reminder)
2. List calendar events overlapping the shift whose text matches the label
3. Any match: the shift is already on the calendar, skip it
4. No match: insert the draft

The deduplication key is (label, overlapping time window). The scheduling
service provides no id that the calendar can index, so the check is a
read-then-write and is only safe with one writer at a time.

Every path ends in a `SyncOutcome`; calendar errors are reported as
`SyncStatus.FAILED` instead of being raised.
"""

from __future__ import annotations

import asyncio
import logging

from shift_sync.calendar.google_calendar import GoogleCalendarClient
from shift_sync.models.event import CalendarEventDraft, SyncOutcome
from shift_sync.models.shift import ShiftRecord

logger = logging.getLogger(__name__)


class EventSyncer:
    """Create at most one calendar event per shift.

    Example:
        ```python
        syncer = EventSyncer(calendar_id="primary")
        outcome = await syncer.sync(shift, "Front Desk", calendar_client)
        if outcome.status == SyncStatus.CREATED:
            print(outcome.html_link)
        ```
    """

    def __init__(
        self,
        calendar_id: str = "primary",
        time_zone: str = "America/New_York",
        reminder_minutes: int = 30,
    ):
        """Initialize the syncer.

        Args:
            calendar_id: Calendar to read and write
            time_zone: Zone the events are rendered in
            reminder_minutes: Popup reminder lead time
        """
        self.calendar_id = calendar_id
        self.time_zone = time_zone
        self.reminder_minutes = reminder_minutes

    def build_draft(self, shift: ShiftRecord, label: str) -> CalendarEventDraft:
        """Build the event draft for a shift."""
        return CalendarEventDraft(
            summary=label,
            start_time=shift.start_time,
            end_time=shift.end_time,
            time_zone=self.time_zone,
            reminder_minutes=self.reminder_minutes,
        )

    async def sync(
        self,
        shift: ShiftRecord,
        label: str,
        calendar: GoogleCalendarClient,
    ) -> SyncOutcome:
        """Reconcile one shift with the calendar.

        Args:
            shift: Shift to sync (must have start and end times)
            label: Resolved position label, used as title and dedup text
            calendar: Authorized calendar client

        Returns:
            CREATED, SKIPPED_DUPLICATE or FAILED outcome
        """
        if shift.start_time is None or shift.end_time is None:
            return SyncOutcome.failed(shift, label, "shift has no start or end time")

        draft = self.build_draft(shift, label)

        try:
            existing = await asyncio.to_thread(
                calendar.list_events,
                self.calendar_id,
                draft.start_time,
                draft.end_time,
                query=label,
            )
        except Exception as e:
            logger.error(f"Error checking calendar for {label}: {e}")
            return SyncOutcome.failed(shift, label, f"calendar lookup failed: {e}")

        if existing:
            logger.info(
                f"Event for {label} already exists "
                f"({len(existing)} match(es), first {existing[0].id})"
            )
            return SyncOutcome.skipped(shift, label)

        try:
            event = await asyncio.to_thread(
                calendar.insert_event,
                self.calendar_id,
                draft.to_api_body(),
            )
        except Exception as e:
            logger.error(f"The API returned an error creating {label}: {e}")
            return SyncOutcome.failed(shift, label, str(e))

        logger.info(f"Event created: {event.html_link}")
        return SyncOutcome.created(shift, label, event.html_link, event_id=event.id)
