"""
Sentry SDK configuration.

Implements:
- Environment-based initialization
- PII scrubbing (only user ids leave the process)
- Loguru and SQLAlchemy integrations
"""

import os

import sentry_sdk
from sentry_sdk.integrations.loguru import LoguruIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.types import Event, Hint

# Extra keys that may carry report text or user names
_SCRUBBED_EXTRA_KEYS = ("reason", "body", "creator_name", "reported_user_name")


def _before_send(event: Event, hint: Hint) -> Event | None:
    """
    Scrub PII before sending to Sentry.

    Args:
        event: Sentry event.
        hint: Additional context about the event.

    Returns:
        Modified event with PII removed.
    """
    user = event.get("user")
    if user:
        user.pop("email", None)
        user.pop("username", None)
        if "ip_address" in user:
            user["ip_address"] = "{{auto}}"

    extra = event.get("extra")
    if isinstance(extra, dict):
        for key in _SCRUBBED_EXTRA_KEYS:
            if key in extra:
                extra[key] = "[Filtered]"

    return event


def init_sentry() -> bool:
    """
    Initialize Sentry SDK.

    Sentry is disabled if the SENTRY_DSN environment variable is not set.

    Returns:
        True when Sentry was initialized.
    """
    dsn = os.getenv("SENTRY_DSN")

    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        release=os.getenv("SENTRY_RELEASE", "unknown"),
        send_default_pii=False,
        integrations=[
            SqlalchemyIntegration(),
            LoguruIntegration(),
        ],
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.2")),
        sample_rate=1.0,
        before_send=_before_send,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        ignore_errors=[
            KeyboardInterrupt,
            SystemExit,
        ],
    )
    return True
