"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
Secrets (Sling token, webhook URL, token encryption key) should be provided
via environment variables or a local `.env` file, never committed.

## Required Environment Variables

- SLING_TOKEN: Authorization token for the Sling API

## Optional Environment Variables

- GOOGLE_CALENDAR_ID: Target calendar (default: primary)
- DISCORD_WEBHOOK_URL: Status notifications (disabled when unset)
- TOKEN_SECRET_KEY: Encrypt the saved Google token at rest
- POSITION_LABELS: JSON object mapping Sling position ids to labels
- LOG_LEVEL: Logging level (default: INFO)

## Example .env file

```
SLING_TOKEN=your-sling-token
GOOGLE_CALENDAR_ID=abc123@group.calendar.google.com
DISCORD_WEBHOOK_URL=https://discord.com/api/webhooks/...
POSITION_LABELS={"1710948": "Front Desk", "1710949": "Check In Desk"}
```
"""

from __future__ import annotations

import hashlib
from functools import lru_cache
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_POSITION_LABELS: dict[int, str] = {
    18984501: "Shadowing Front Desk",
    1710948: "Front Desk",
    1710949: "Check In Desk",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Shift Calendar Sync"
    app_version: str = "0.1.0"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sling
    sling_token: str = Field(
        ...,
        min_length=1,
        description="Authorization token for the Sling API",
    )
    sling_base_url: str = "https://api.getsling.com/v1"
    sling_timeout_seconds: float = Field(default=30.0, gt=0)

    # Google Calendar API
    google_calendar_id: str = "primary"
    google_calendar_scopes: list[str] = Field(
        default=[
            "https://www.googleapis.com/auth/calendar.readonly",
            "https://www.googleapis.com/auth/calendar.events",
        ],
        description="Google Calendar API scopes",
    )

    # Google OAuth
    google_credentials_path: Path = Path("auth/credentials.json")
    google_token_path: Path = Path("auth/token.json")
    oauth_callback_port: int = Field(default=5369, ge=0, le=65535)

    # Token encryption
    token_secret_key: str | None = Field(
        default=None,
        min_length=32,
        description="Encrypts the saved token file when set (min 32 chars)",
    )
    encryption_salt: str = Field(
        default="",
        validate_default=True,
        description="Salt for token encryption (derived from key if not provided)",
    )

    # Event rendering
    calendar_time_zone: str = "America/New_York"
    reminder_minutes: int = Field(default=30, ge=0, le=40320)
    position_labels: dict[int, str] = Field(
        default_factory=lambda: dict(DEFAULT_POSITION_LABELS),
        description="Sling position id to calendar label",
    )

    # Sync behaviour
    throttle_seconds: float = Field(default=1.0, ge=0)
    max_chain_length: int = Field(default=100, ge=1)
    lookahead_days: int = Field(default=90, ge=1)
    sync_interval_hours: float = Field(default=24.0, gt=0)

    # Notifications
    discord_webhook_url: str | None = None
    notification_timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("calendar_time_zone")
    @classmethod
    def validate_time_zone(cls, v: str) -> str:
        """Reject zones the IANA database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {v}") from e
        return v

    @field_validator("encryption_salt", mode="before")
    @classmethod
    def derive_encryption_salt(cls, v: str, info) -> str:
        """Derive encryption salt from token_secret_key if not provided."""
        if v:
            return v
        secret_key = info.data.get("token_secret_key")
        if secret_key:
            return hashlib.sha256(f"{secret_key}-salt".encode()).hexdigest()[:32]
        return ""

    @property
    def token_encryption_enabled(self) -> bool:
        """Check if the saved token should be encrypted."""
        return bool(self.token_secret_key)

    @property
    def notifications_configured(self) -> bool:
        """Check if a notification webhook is configured."""
        return bool(self.discord_webhook_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
