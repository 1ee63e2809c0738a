"""Shift chain fetching.

The scheduling service only answers "next shift after T". The fetcher walks
forward from a reference time, anchoring each query at the previous shift's
end, until the service reports no further shift.

## Termination

1. **Ended**: no next shift, or a record without an end time or position
2. **Ended with error**: the service or transport failed; shifts already
   collected are kept
3. **Limit reached**: `max_chain_length` records collected, or the next
   shift ends beyond the lookahead horizon

The bounds exist because a service that always returns a next shift would
otherwise drive an unbounded loop.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import httpx

from shift_sync.models.shift import ChainStatus, ChainStep, ShiftChain
from shift_sync.providers.base import ProviderError, ShiftProvider

logger = logging.getLogger(__name__)


class ShiftChainFetcher:
    """Collect the chain of upcoming shifts from a provider.

    Example:
        ```python
        fetcher = ShiftChainFetcher(provider, max_chain_length=100, lookahead_days=90)
        chain = await fetcher.fetch(datetime.now(timezone.utc))
        for shift in chain.shifts:
            ...
        ```
    """

    def __init__(
        self,
        provider: ShiftProvider,
        max_chain_length: int = 100,
        lookahead_days: int = 90,
    ):
        """Initialize the fetcher.

        Args:
            provider: Source of "next shift" answers
            max_chain_length: Maximum shifts collected per fetch
            lookahead_days: Ignore shifts ending later than this from the reference
        """
        if max_chain_length < 1:
            raise ValueError("max_chain_length must be at least 1")
        if lookahead_days < 1:
            raise ValueError("lookahead_days must be at least 1")

        self.provider = provider
        self.max_chain_length = max_chain_length
        self.lookahead = timedelta(days=lookahead_days)

    async def fetch(self, reference_time: datetime) -> ShiftChain:
        """Fetch the shift chain starting at `reference_time`.

        Never raises for source failures; see `ShiftChain.status`.
        """
        if reference_time.tzinfo is None:
            reference_time = reference_time.replace(tzinfo=timezone.utc)

        chain = ShiftChain(reference_time=reference_time)
        horizon = reference_time + self.lookahead
        anchor = reference_time

        while True:
            if len(chain.shifts) >= self.max_chain_length:
                logger.warning(
                    f"Shift chain stopped at {self.max_chain_length} shifts"
                )
                chain.status = ChainStatus.LIMIT_REACHED
                break

            step = await self._next_step(anchor)

            if step.status != ChainStatus.CONTINUING:
                chain.status = step.status
                chain.error = step.error
                break

            shift = step.shift
            if shift.end_time > horizon:
                logger.info(
                    f"Shift ending {shift.end_time.isoformat()} is beyond the "
                    f"lookahead horizon {horizon.isoformat()}"
                )
                chain.status = ChainStatus.LIMIT_REACHED
                break

            if shift.end_time <= anchor:
                logger.warning(
                    f"Shift {shift.id} ends at {shift.end_time.isoformat()}, "
                    f"not after {anchor.isoformat()}; ending chain"
                )
                chain.status = ChainStatus.ENDED
                break

            chain.shifts.append(shift)
            anchor = shift.end_time

        logger.info(
            f"Fetched {len(chain.shifts)} shifts from {self.provider.name} "
            f"({chain.status.value})"
        )
        return chain

    async def _next_step(self, anchor: datetime) -> ChainStep:
        """Ask the provider for one more shift."""
        try:
            shift = await self.provider.get_next_shift(anchor)
        except (ProviderError, httpx.HTTPError) as e:
            logger.error(f"Error fetching next shift after {anchor.isoformat()}: {e}")
            return ChainStep(status=ChainStatus.ENDED_WITH_ERROR, error=str(e) or repr(e))
        except ValueError as e:
            # Payload could not be modelled; treat like any malformed terminal record
            logger.warning(f"Malformed shift after {anchor.isoformat()}: {e}")
            return ChainStep(status=ChainStatus.ENDED)

        if shift is None or not shift.is_chainable:
            return ChainStep(status=ChainStatus.ENDED, shift=shift)

        return ChainStep(status=ChainStatus.CONTINUING, shift=shift)
