"""Shift models.

A shift is one work assignment published by the scheduling service. Shifts
are discovered one at a time: the service answers "what is the next shift at
or after T", and the end of each shift becomes the next T. The resulting
ordered sequence is a shift chain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


def parse_instant(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp into an aware UTC datetime.

    Naive timestamps are taken to be UTC. Returns None for missing or
    unparsable values.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def isoformat_utc(value: datetime) -> str:
    """Format an instant as a UTC ISO 8601 string with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (
        value.astimezone(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class ShiftRecord(BaseModel):
    """One shift as reported by the scheduling service."""

    id: int | str | None = Field(default=None, description="Upstream shift id")
    start_time: datetime | None = Field(default=None, description="Shift start (UTC)")
    end_time: datetime | None = Field(default=None, description="Shift end (UTC)")
    position_id: int | str | None = Field(
        default=None, description="Opaque position identifier"
    )
    raw_data: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @property
    def is_chainable(self) -> bool:
        """A record extends a chain only with an end time and a position."""
        return self.end_time is not None and self.position_id is not None


class ChainStatus(str, Enum):
    """Outcome of a single chain step, or of a whole chain fetch."""

    CONTINUING = "continuing"
    ENDED = "ended"  # No further shift, or a malformed terminal record
    ENDED_WITH_ERROR = "ended_with_error"  # Source failed, chain is partial
    LIMIT_REACHED = "limit_reached"  # Length or lookahead bound hit


@dataclass
class ChainStep:
    """Result of asking the source for one more shift."""

    status: ChainStatus
    shift: ShiftRecord | None = None
    error: str | None = None


@dataclass
class ShiftChain:
    """Ordered shifts discovered from a reference time."""

    reference_time: datetime
    shifts: list[ShiftRecord] = field(default_factory=list)
    status: ChainStatus = ChainStatus.ENDED
    error: str | None = None

    @property
    def is_partial(self) -> bool:
        """True if the source failed before the chain ended normally."""
        return self.status == ChainStatus.ENDED_WITH_ERROR

    def __len__(self) -> int:
        return len(self.shifts)
