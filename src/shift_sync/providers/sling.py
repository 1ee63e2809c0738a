"""Sling shift provider.

## Endpoint
- Base URL: https://api.getsling.com/v1
- Next shift: GET /shifts/next?referenceDate=2024-01-01T00:00:00.000Z

## Authentication
- `Authorization` header carrying the raw Sling token (no scheme prefix)

## Response Format
```json
{
  "id": 123456789,
  "dtstart": "2024-01-02T09:00:00-05:00",
  "dtend": "2024-01-02T17:00:00-05:00",
  "position": {"id": 1710948},
  "location": {"id": 42},
  "user": {"id": 7}
}
```

## Field Translation (Sling -> Canonical)
| Sling Field | Canonical Field | Notes |
|-------------|-----------------|-------|
| id | id | |
| dtstart | start_time | Normalized to UTC |
| dtend | end_time | Normalized to UTC |
| position.id | position_id | May be null |

An empty body, `null`, 204 or 404 means there is no next shift.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from shift_sync.models.shift import ShiftRecord, isoformat_utc, parse_instant
from shift_sync.providers.base import ShiftProvider

logger = logging.getLogger(__name__)


class SlingProvider(ShiftProvider):
    """Sling (getsling.com) shift provider.

    Example:
        ```python
        async with SlingProvider(api_token=settings.sling_token) as sling:
            shift = await sling.get_next_shift(datetime.now(timezone.utc))
        ```
    """

    name = "sling"
    base_url = "https://api.getsling.com/v1"

    async def get_next_shift(self, reference_time: datetime) -> ShiftRecord | None:
        """Get the next shift at or after `reference_time`."""
        url = f"{self.base_url}/shifts/next"
        params = {"referenceDate": isoformat_utc(reference_time)}

        response = await self._fetch(url, params=params)

        if response.status_code in self.empty_statuses or not response.content.strip():
            logger.debug(f"No shift after {params['referenceDate']}")
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning(f"Unparsable response from {self.name}: {response.text[:200]}")
            return None

        return self._translate_response(data)

    def _translate_response(self, response_data: Any) -> ShiftRecord | None:
        """Translate a Sling shift payload to a ShiftRecord."""
        if not isinstance(response_data, dict) or not response_data:
            return None

        position = response_data.get("position")
        position_id = position.get("id") if isinstance(position, dict) else None

        return ShiftRecord(
            id=response_data.get("id"),
            start_time=parse_instant(response_data.get("dtstart")),
            end_time=parse_instant(response_data.get("dtend")),
            position_id=position_id,
            raw_data=response_data,
        )
