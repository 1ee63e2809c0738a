"""Command-line interface for shift calendar sync."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import timedelta

from google.auth.exceptions import GoogleAuthError
from pydantic import ValidationError

from shift_sync import __version__
from shift_sync.auth.google import CredentialError, GoogleCredentialProvider
from shift_sync.calendar.google_calendar import GoogleCalendarClient
from shift_sync.config import Settings, get_settings
from shift_sync.notifications.discord import DiscordNotifier
from shift_sync.providers.sling import SlingProvider
from shift_sync.scheduler import PeriodicScheduler
from shift_sync.service import ShiftSyncService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Configure root logging for the process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # googleapiclient logs every discovery cache miss at WARNING
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


async def authorize(settings: Settings) -> None:
    """Obtain and persist Google credentials."""
    async with DiscordNotifier(
        settings.discord_webhook_url,
        timeout=settings.notification_timeout_seconds,
    ) as notifier:
        await GoogleCredentialProvider(settings, notifier).authorize()


async def sync(settings: Settings, forever: bool = False) -> None:
    """Authorize, then sync once or on the configured schedule."""
    async with DiscordNotifier(
        settings.discord_webhook_url,
        timeout=settings.notification_timeout_seconds,
    ) as notifier:
        credentials = await GoogleCredentialProvider(settings, notifier).authorize()
        calendar = GoogleCalendarClient(credentials)

        async with SlingProvider(
            api_token=settings.sling_token,
            base_url=settings.sling_base_url,
            timeout=settings.sling_timeout_seconds,
        ) as sling:
            service = ShiftSyncService.from_settings(settings, sling, notifier)

            if not forever:
                await service.run(calendar)
                return

            scheduler = PeriodicScheduler(
                lambda: service.run(calendar),
                interval=timedelta(hours=settings.sync_interval_hours),
                notifier=notifier,
            )
            await scheduler.run_forever()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shift-sync",
        description="Shift Calendar Sync - Copy upcoming Sling shifts into Google Calendar",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "run", help="Sync now, then again every SYNC_INTERVAL_HOURS"
    )
    subparsers.add_parser("sync", help="Sync once and exit")
    subparsers.add_parser(
        "authorize", help="Run the Google consent flow and save the token"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2

    configure_logging(args.log_level or settings.log_level)

    if args.command == "authorize":
        coro = authorize(settings)
    else:
        coro = sync(settings, forever=args.command == "run")

    try:
        asyncio.run(coro)
    except (CredentialError, GoogleAuthError) as e:
        logger.error(f"Authorization failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
