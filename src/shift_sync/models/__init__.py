"""Domain models for shift calendar sync."""

from shift_sync.models.shift import (
    ShiftRecord,
    ShiftChain,
    ChainStep,
    ChainStatus,
    parse_instant,
    isoformat_utc,
)
from shift_sync.models.event import (
    CalendarEventDraft,
    SyncOutcome,
    SyncStatus,
)

__all__ = [
    # Shift
    "ShiftRecord",
    "ShiftChain",
    "ChainStep",
    "ChainStatus",
    "parse_instant",
    "isoformat_utc",
    # Event
    "CalendarEventDraft",
    "SyncOutcome",
    "SyncStatus",
]
