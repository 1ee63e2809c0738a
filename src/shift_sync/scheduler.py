"""Periodic job scheduling.

Runs a sync job once immediately and then on a fixed interval measured from
process start. Each tick starts the job as its own task, so a run that
stalls does not delay later ticks; the job itself is expected to guard
against overlapping runs.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

from shift_sync.notifications.base import Notifier

logger = logging.getLogger(__name__)

TICK_MESSAGE = "Running the job"


class PeriodicScheduler:
    """Invoke a job now and then every `interval`.

    Example:
        ```python
        scheduler = PeriodicScheduler(
            lambda: service.run(calendar),
            interval=timedelta(hours=24),
            notifier=notifier,
        )
        await scheduler.run_forever()
        ```
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[Any]],
        interval: timedelta,
        notifier: Notifier | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        clock: Callable[[], float] | None = None,
    ):
        """Initialize the scheduler.

        Args:
            job: Coroutine factory invoked on every tick
            interval: Time between ticks
            notifier: Told about every scheduled tick after the first
            sleep: Awaitable sleep (defaults to asyncio.sleep)
            clock: Monotonic clock in seconds (defaults to time.monotonic)
        """
        if interval.total_seconds() <= 0:
            raise ValueError("interval must be positive")

        self.job = job
        self.interval = interval
        self.notifier = notifier
        self._sleep = sleep or asyncio.sleep
        self._clock = clock or time.monotonic
        self._tasks: set[asyncio.Task] = set()

    async def run_forever(self, max_runs: int | None = None) -> None:
        """Run the schedule.

        Args:
            max_runs: Stop after this many ticks and wait for the started
                jobs (None runs until cancelled)
        """
        interval = self.interval.total_seconds()
        start = self._clock()
        runs = 0

        try:
            while max_runs is None or runs < max_runs:
                if runs:
                    next_at = start + runs * interval
                    await self._sleep(max(0.0, next_at - self._clock()))
                    logger.info(TICK_MESSAGE)
                    if self.notifier is not None:
                        await self.notifier.send(TICK_MESSAGE)

                task = asyncio.create_task(self._invoke())
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
                runs += 1
        except asyncio.CancelledError:
            for task in list(self._tasks):
                task.cancel()
            raise

        if self._tasks:
            await asyncio.gather(*self._tasks)

    async def _invoke(self) -> None:
        try:
            await self.job()
        except Exception as e:
            logger.exception(f"Scheduled job failed: {e}")
