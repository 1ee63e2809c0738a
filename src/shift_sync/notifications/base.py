"""Notification sink abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Notifier(ABC):
    """Best-effort delivery of human-readable status messages.

    Implementations must never raise from `send`; delivery failures are
    logged and dropped.
    """

    name: str

    @abstractmethod
    async def send(self, message: str) -> None:
        """Deliver a message."""
        pass

    async def aclose(self) -> None:
        """Release any resources held by the notifier."""
        return None
