"""Position id to label lookup."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from shift_sync.config import DEFAULT_POSITION_LABELS

UNKNOWN_POSITION_LABEL = "Unknown"


class PositionResolver:
    """Map opaque Sling position ids to calendar labels.

    Lookup is total: ids that are missing, unparsable or not in the table
    resolve to `UNKNOWN_POSITION_LABEL`.

    Example:
        ```python
        resolver = PositionResolver()
        resolver.resolve(1710948)  # "Front Desk"
        resolver.resolve(None)  # "Unknown"
        ```
    """

    def __init__(self, labels: Mapping[int, str] | None = None):
        self._labels: dict[int, str] = dict(
            DEFAULT_POSITION_LABELS if labels is None else labels
        )

    @property
    def labels(self) -> dict[int, str]:
        return dict(self._labels)

    def resolve(self, position_id: Any) -> str:
        """Resolve a position id to its label."""
        if position_id is None or isinstance(position_id, bool):
            return UNKNOWN_POSITION_LABEL
        try:
            key = int(position_id)
        except (TypeError, ValueError):
            return UNKNOWN_POSITION_LABEL
        return self._labels.get(key, UNKNOWN_POSITION_LABEL)
