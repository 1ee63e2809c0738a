"""Shift sync orchestration.

Composes the chain fetcher, position resolver and event syncer into one
sync run.

## Run Process

1. Anchor the reference time at the current wall-clock time
2. Fetch the shift chain from the reference time
3. For each shift, in chain order:
   a. Resolve the position label
   b. Sync the calendar event (check, then insert)
   c. Notify the outcome
   d. Wait the throttle interval
4. Catch anything unexpected, log and notify it, and return

Only one run executes at a time per service. A run requested while another
is in progress is skipped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from shift_sync.calendar.google_calendar import GoogleCalendarClient
from shift_sync.calendar.sync import EventSyncer
from shift_sync.config import Settings
from shift_sync.models.event import SyncOutcome, SyncStatus
from shift_sync.models.shift import ChainStatus, ShiftChain, ShiftRecord
from shift_sync.notifications.base import Notifier
from shift_sync.providers.base import ShiftProvider
from shift_sync.shifts.chain import ShiftChainFetcher
from shift_sync.shifts.positions import PositionResolver

logger = logging.getLogger(__name__)

MESSAGE_TIME_FORMAT = "%a %b %d %Y %I:%M %p %Z"


@dataclass
class SyncRunResult:
    """Result of one sync run."""

    reference_time: datetime
    ran: bool = True
    chain_status: ChainStatus | None = None
    shifts_found: int = 0
    outcomes: list[SyncOutcome] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    finished_at: datetime | None = None

    def _count(self, status: SyncStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def events_created(self) -> int:
        return self._count(SyncStatus.CREATED)

    @property
    def events_skipped(self) -> int:
        return self._count(SyncStatus.SKIPPED_DUPLICATE)

    @property
    def events_failed(self) -> int:
        return self._count(SyncStatus.FAILED)

    @property
    def success(self) -> bool:
        return self.ran and len(self.errors) == 0 and self.events_failed == 0


class ShiftSyncService:
    """Sync the upcoming shift chain into the calendar.

    Example:
        ```python
        service = ShiftSyncService(
            fetcher=ShiftChainFetcher(sling),
            resolver=PositionResolver(),
            syncer=EventSyncer(calendar_id="primary"),
            notifier=DiscordNotifier(webhook_url),
        )
        result = await service.run(calendar_client)
        ```
    """

    def __init__(
        self,
        fetcher: ShiftChainFetcher,
        resolver: PositionResolver,
        syncer: EventSyncer,
        notifier: Notifier,
        throttle_seconds: float = 1.0,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ):
        """Initialize the service.

        Args:
            fetcher: Shift chain fetcher
            resolver: Position label lookup
            syncer: Calendar event syncer
            notifier: Receives one message per shift plus run errors
            throttle_seconds: Pause after each shift
            clock: Returns the current time (defaults to UTC now)
            sleep: Awaitable sleep used for throttling (defaults to asyncio.sleep)
        """
        self.fetcher = fetcher
        self.resolver = resolver
        self.syncer = syncer
        self.notifier = notifier
        self.throttle_seconds = throttle_seconds
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sleep = sleep or asyncio.sleep
        self._run_lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        provider: ShiftProvider,
        notifier: Notifier,
    ) -> ShiftSyncService:
        """Build a service wired from application settings."""
        return cls(
            fetcher=ShiftChainFetcher(
                provider,
                max_chain_length=settings.max_chain_length,
                lookahead_days=settings.lookahead_days,
            ),
            resolver=PositionResolver(settings.position_labels),
            syncer=EventSyncer(
                calendar_id=settings.google_calendar_id,
                time_zone=settings.calendar_time_zone,
                reminder_minutes=settings.reminder_minutes,
            ),
            notifier=notifier,
            throttle_seconds=settings.throttle_seconds,
        )

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    async def run(self, calendar: GoogleCalendarClient) -> SyncRunResult:
        """Run one sync.

        Never raises; failures are logged, notified and recorded on the
        returned result.
        """
        reference_time = self._clock()

        if self._run_lock.locked():
            logger.warning("Sync already in progress, skipping this run")
            await self.notifier.send("Sync already in progress, skipping this run")
            return SyncRunResult(reference_time=reference_time, ran=False)

        async with self._run_lock:
            result = SyncRunResult(reference_time=reference_time)
            try:
                await self._run(calendar, result)
            except Exception as e:
                logger.exception(f"Sync run failed: {e}")
                result.errors.append(str(e))
                await self.notifier.send(f"Error: {e}")
            result.finished_at = self._clock()

        logger.info(
            f"Sync finished: {result.shifts_found} shifts, "
            f"{result.events_created} created, "
            f"{result.events_skipped} skipped, "
            f"{result.events_failed} failed"
        )
        return result

    async def _run(self, calendar: GoogleCalendarClient, result: SyncRunResult) -> None:
        chain = await self.fetcher.fetch(result.reference_time)
        result.chain_status = chain.status
        result.shifts_found = len(chain)

        if chain.is_partial:
            result.errors.append(f"Shift lookup stopped early: {chain.error}")
            await self.notifier.send(
                f"Shift lookup stopped early after {len(chain)} shift(s): {chain.error}"
            )

        await self._sync_chain(chain, calendar, result)

    async def _sync_chain(
        self,
        chain: ShiftChain,
        calendar: GoogleCalendarClient,
        result: SyncRunResult,
    ) -> None:
        for shift in chain.shifts:
            label = self.resolver.resolve(shift.position_id)
            outcome = await self.syncer.sync(shift, label, calendar)
            result.outcomes.append(outcome)

            await self.notifier.send(self.describe_outcome(outcome))

            await self._sleep(self.throttle_seconds)

    def describe_outcome(self, outcome: SyncOutcome) -> str:
        """Render a human-readable status message for an outcome."""
        window = self._describe_window(outcome.shift)

        if outcome.status == SyncStatus.CREATED:
            return f"Event created for {outcome.label} {window}"
        if outcome.status == SyncStatus.SKIPPED_DUPLICATE:
            return f"Event for {outcome.label} {window} already exists"
        return f"Error creating event for {outcome.label} {window}: {outcome.reason}"

    def _describe_window(self, shift: ShiftRecord) -> str:
        zone = ZoneInfo(self.syncer.time_zone)

        def fmt(value: datetime | None) -> str:
            if value is None:
                return "?"
            return value.astimezone(zone).strftime(MESSAGE_TIME_FORMAT)

        return f"from {fmt(shift.start_time)} to {fmt(shift.end_time)}"
