"""Notification type definitions for moderator alerts."""

from enum import Enum
from typing import NamedTuple


class NotificationConfig(NamedTuple):
    """Configuration for a notification type."""

    topic_suffix: str
    default_priority: str  # min, low, default, high, max
    tags: str  # comma-separated emoji shortcodes


class NotificationType(Enum):
    """
    Notification types with their topic suffix, default priority, and tags.

    Each type maps to a specific ntfy topic so moderators can subscribe
    to the alerts they care about.
    """

    REPORT = NotificationConfig("reports", "high", "rotating_light,report")
    AUTOBAN = NotificationConfig("bans", "default", "hammer,robot")
    CRITICAL = NotificationConfig("critical", "max", "skull,warning")

    @property
    def topic_suffix(self) -> str:
        """Get the topic suffix for this notification type."""
        return self.value.topic_suffix

    @property
    def default_priority(self) -> str:
        """Get the default priority for this notification type."""
        return self.value.default_priority

    @property
    def tags(self) -> str:
        """Get the tags for this notification type."""
        return self.value.tags
