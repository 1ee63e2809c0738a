"""Shift-scheduling service providers."""

from shift_sync.providers.base import (
    AuthenticationError,
    ProviderError,
    RateLimitError,
    ShiftProvider,
)
from shift_sync.providers.sling import SlingProvider

__all__ = [
    "ShiftProvider",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "SlingProvider",
]
