import os
import sys

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Determine if .env should be loaded.

    Local development picks up `backend/.env` for convenience. Do NOT
    auto-load `.env` when running under pytest or in CI, so tests that rely
    on missing secrets keep failing fast.
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    # Environment configuration
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'staging', or 'production'",
    )

    DATABASE_URL: str = "sqlite:///./data/modreports.db"
    SECRET_KEY: str = Field(
        ...,  # Required, no default
        description="Signing key for keyed dmail links - set via SECRET_KEY",
    )

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(
        default=5,
        description="Number of persistent connections in pool",
    )
    DB_MAX_OVERFLOW: int = Field(
        default=10,
        description="Extra connections when pool exhausted",
    )
    DB_POOL_TIMEOUT: int = Field(
        default=30,
        description="Seconds to wait for connection from pool",
    )
    DB_POOL_RECYCLE: int = Field(
        default=1800,
        description="Recycle connections after N seconds (30 min default)",
    )

    # System account used for automated posts, dmails and bans
    SYSTEM_USER_NAME: str = Field(
        default="System",
        description="Name of the designated system account",
    )

    # Moderation report forum topic
    REPORT_TOPIC_TITLE: str = Field(
        default="Reports requiring moderation",
        description="Title of the forum topic that collects report notices",
    )
    REPORT_TOPIC_CATEGORY_ID: int = Field(
        default=0,
        description="Forum category of the report topic",
    )
    REPORT_QUOTE_MAX_LENGTH: int = Field(
        default=2000,
        description="Maximum characters of reported content quoted in the notice",
    )
    REPORT_RECENT_DAYS: int = Field(
        default=7,
        description="Window in days for the 'recent reports' scope",
    )

    # Spam autoban
    AUTOBAN_THRESHOLD: int = Field(
        default=10,
        description="Distinct reporters within the window that mark a user as spammer",
    )
    AUTOBAN_WINDOW_HOURS: int = Field(
        default=24,
        description="Lookback window for counting reports against a user",
    )
    AUTOBAN_DURATION_DAYS: int = Field(
        default=999999,
        description="Duration of automatic spam bans",
    )

    # Ntfy Push Notification Settings
    NTFY_URL: str = Field(
        default="",
        description="Ntfy server URL (internal Docker: http://ntfy:80)",
    )
    NTFY_TOPIC_PREFIX: str = Field(
        default="modreports-admin",
        description="Prefix for notification topics",
    )
    NTFY_AUTH_TOKEN: str = Field(
        default="",
        description="Optional auth token for publishing (if ntfy requires auth)",
    )
    NTFY_ENABLED: bool = Field(
        default=True,
        description="Enable/disable notifications globally",
    )
    APP_URL: str = Field(
        default="http://localhost:3000",
        description="Frontend URL for notification deep links",
    )

    @field_validator("SYSTEM_USER_NAME", "REPORT_TOPIC_TITLE")
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Reject blank identifiers."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",  # Allow extra env vars (e.g., SENTRY_DSN) without validation errors
    )


# Instantiating Settings() raises pydantic.ValidationError if SECRET_KEY isn't set.
settings = Settings()  # type: ignore[call-arg]
