"""Calendar event models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from shift_sync.models.shift import ShiftRecord, isoformat_utc


class CalendarEventDraft(BaseModel):
    """An event to be inserted for one shift.

    Times are instants; `time_zone` is only used when rendering the event so
    the calendar shows it in local time.
    """

    summary: str = Field(..., description="Event title (the position label)")
    start_time: datetime
    end_time: datetime
    time_zone: str = "America/New_York"
    reminder_minutes: int = Field(default=30, ge=0)

    def to_api_body(self) -> dict[str, Any]:
        """Convert to a Google Calendar API insert body."""
        return {
            "summary": self.summary,
            "start": {
                "dateTime": isoformat_utc(self.start_time),
                "timeZone": self.time_zone,
            },
            "end": {
                "dateTime": isoformat_utc(self.end_time),
                "timeZone": self.time_zone,
            },
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "popup", "minutes": self.reminder_minutes},
                ],
            },
        }


class SyncStatus(str, Enum):
    """What happened when a shift was reconciled with the calendar."""

    CREATED = "created"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    FAILED = "failed"


@dataclass
class SyncOutcome:
    """Tagged result of syncing one shift."""

    status: SyncStatus
    label: str
    shift: ShiftRecord
    html_link: str | None = None
    event_id: str | None = None
    reason: str | None = None

    @classmethod
    def created(
        cls,
        shift: ShiftRecord,
        label: str,
        html_link: str | None,
        event_id: str | None = None,
    ) -> SyncOutcome:
        return cls(
            status=SyncStatus.CREATED,
            label=label,
            shift=shift,
            html_link=html_link,
            event_id=event_id,
        )

    @classmethod
    def skipped(cls, shift: ShiftRecord, label: str) -> SyncOutcome:
        return cls(status=SyncStatus.SKIPPED_DUPLICATE, label=label, shift=shift)

    @classmethod
    def failed(cls, shift: ShiftRecord, label: str, reason: str) -> SyncOutcome:
        return cls(status=SyncStatus.FAILED, label=label, shift=shift, reason=reason)
