"""
Moderator alert service using self-hosted ntfy.

Sends push notifications to moderator devices when reports arrive or a
spammer is banned automatically. Uses fire-and-forget pattern - failures
are logged but never raised to the report workflow.
"""

import asyncio

import httpx
from loguru import logger

from models.config import settings
from models.notification_types import NotificationType

# Longest reason excerpt included in a push notification
REASON_PREVIEW_LENGTH = 200


class NotificationService:
    """
    Moderator push notification service using self-hosted ntfy.

    All methods are fire-and-forget: they log failures but never raise
    exceptions or block the calling code.
    """

    @classmethod
    def _get_topic(cls, notification_type: NotificationType) -> str:
        """Build full topic name from type."""
        prefix = settings.NTFY_TOPIC_PREFIX or "modreports-admin"
        return f"{prefix}-{notification_type.topic_suffix}"

    @classmethod
    async def _send_async(
        cls,
        notification_type: NotificationType,
        title: str,
        message: str,
        click_url: str | None = None,
        priority_override: str | None = None,
    ) -> bool:
        """
        Internal async send method.

        Args:
            notification_type: Determines topic and default priority
            title: Notification title (shown prominently)
            message: Notification body
            click_url: URL to open when notification is tapped
            priority_override: Override default priority (min/low/default/high/max)

        Returns:
            True if sent successfully, False otherwise
        """
        ntfy_url = settings.NTFY_URL
        if not ntfy_url or not settings.NTFY_ENABLED:
            logger.debug("Ntfy not configured or disabled, skipping notification")
            return False

        topic = cls._get_topic(notification_type)
        priority = priority_override or notification_type.default_priority

        headers: dict[str, str] = {
            "Title": title,
            "Priority": priority,
            "Tags": notification_type.tags,
        }

        if settings.NTFY_AUTH_TOKEN:
            headers["Authorization"] = f"Bearer {settings.NTFY_AUTH_TOKEN}"

        if click_url:
            headers["Click"] = click_url
            headers["Actions"] = f"view, Open, {click_url}"

        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.post(
                    f"{ntfy_url}/{topic}",
                    headers=headers,
                    content=message,
                )
                response.raise_for_status()
                logger.info(f"Notification sent to {topic}: {title}")
                return True
        except httpx.TimeoutException:
            logger.warning(f"Ntfy timeout sending to {topic}: {title}")
            return False
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Ntfy HTTP error {e.response.status_code} for {topic}: {title}"
            )
            return False
        except Exception as e:
            logger.warning(f"Ntfy error sending to {topic}: {e}")
            return False

    @classmethod
    def send_fire_and_forget(
        cls,
        notification_type: NotificationType,
        title: str,
        message: str,
        click_url: str | None = None,
        priority_override: str | None = None,
    ) -> None:
        """
        Send notification without blocking (fire-and-forget).

        Inside a running event loop a background task is scheduled;
        otherwise the send runs to completion on a private loop.

        Args:
            notification_type: Determines topic and default priority
            title: Notification title
            message: Notification body
            click_url: URL to open when tapped
            priority_override: Override default priority
        """
        coro = cls._send_async(
            notification_type, title, message, click_url, priority_override
        )
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No event loop, running notification sync")
            asyncio.run(coro)
            return
        loop.create_task(coro)

    # =========================================================================
    # Convenience Methods
    # =========================================================================

    @classmethod
    def notify_new_report(
        cls,
        report_id: int,
        shortlink: str,
        reason: str,
        reporter_name: str,
    ) -> None:
        """
        Notify moderators of a new moderation report.

        Args:
            report_id: Database ID of the report
            shortlink: Short reference to the reported content
            reason: Reason given by the reporter
            reporter_name: Name of the reporting user
        """
        reason_preview = (
            reason[:REASON_PREVIEW_LENGTH] + "..."
            if len(reason) > REASON_PREVIEW_LENGTH
            else reason
        )
        cls.send_fire_and_forget(
            NotificationType.REPORT,
            f"New Report: {shortlink}",
            f"Report: modreport #{report_id}\nBy: {reporter_name}\n\nReason: {reason_preview}",
            f"{settings.APP_URL}/moderation_reports/{report_id}",
        )

    @classmethod
    def notify_autoban(cls, user_id: int, user_name: str, ban_id: int) -> None:
        """
        Notify moderators that a spammer was banned automatically.

        Args:
            user_id: Database ID of the banned user
            user_name: Name of the banned user
            ban_id: Database ID of the ban
        """
        cls.send_fire_and_forget(
            NotificationType.AUTOBAN,
            "Spammer Banned Automatically",
            f"User: {user_name}\nID: {user_id}\nBan: #{ban_id}",
            f"{settings.APP_URL}/bans/{ban_id}",
        )

    @classmethod
    def notify_critical(
        cls,
        title: str,
        message: str,
        click_url: str | None = None,
    ) -> None:
        """
        Send critical/urgent notification (invariant violations, system issues).

        Args:
            title: Alert title
            message: Alert details
            click_url: Optional URL for more info
        """
        cls.send_fire_and_forget(
            NotificationType.CRITICAL,
            title,
            message,
            click_url or settings.APP_URL,
            priority_override="max",
        )
