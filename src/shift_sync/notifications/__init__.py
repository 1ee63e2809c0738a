"""Status notifications."""

from shift_sync.notifications.base import Notifier
from shift_sync.notifications.discord import DiscordNotifier, truncate_message

__all__ = [
    "Notifier",
    "DiscordNotifier",
    "truncate_message",
]
