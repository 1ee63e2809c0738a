"""Shift discovery and position labelling."""

from shift_sync.shifts.chain import ShiftChainFetcher
from shift_sync.shifts.positions import UNKNOWN_POSITION_LABEL, PositionResolver

__all__ = [
    "ShiftChainFetcher",
    "PositionResolver",
    "UNKNOWN_POSITION_LABEL",
]
