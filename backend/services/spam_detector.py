"""
Spam detection and automatic banning.

A user counts as a spammer once enough distinct users have reported
their dmails, comments or forum posts within a short window.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from loguru import logger
from sqlalchemy.orm import Session

from models.config import settings
from repositories.ban_repository import BanRepository
from repositories.db_models import Ban, ModActionCategory, User
from repositories.moderation_report_repository import ModerationReportRepository
from services.mod_action_service import ModActionService
from services.notification_service import NotificationService
from services.user_service import UserService

AUTOBAN_REASON = "Spambot."


class SpamDetector:
    """Classifies users as spammers and bans them."""

    @staticmethod
    def is_spammer(db: Session, user: User) -> bool:
        """
        Check whether a user qualifies as a spammer.

        Gold-level and higher accounts are never considered spammers.

        Args:
            db: Database session
            user: User to classify

        Returns:
            True if the number of distinct reporters within the autoban
            window reaches the threshold
        """
        if user.is_gold:
            return False

        since = datetime.now(timezone.utc) - timedelta(
            hours=settings.AUTOBAN_WINDOW_HOURS
        )
        reporters = ModerationReportRepository(
            db
        ).count_distinct_reporters_against_user(user.id, since)

        logger.debug(
            f"User {user.id} reported by {reporters} distinct users "
            f"in the last {settings.AUTOBAN_WINDOW_HOURS}h"
        )
        return reporters >= settings.AUTOBAN_THRESHOLD

    @staticmethod
    def ban_spammer(db: Session, user: User) -> Optional[Ban]:
        """
        Ban a spammer on behalf of the system account.

        Args:
            db: Database session
            user: User to ban

        Returns:
            Created ban, or None if the user was already banned
        """
        if user.is_banned:
            logger.info(f"User {user.id} already banned, skipping autoban")
            return None

        system_user = UserService.get_system_user(db)
        ban_repo = BanRepository(db)

        duration_days = settings.AUTOBAN_DURATION_DAYS
        ban = Ban(
            user_id=user.id,
            banner_id=system_user.id,
            reason=AUTOBAN_REASON,
            duration_days=duration_days,
            expires_at=datetime.now(timezone.utc) + timedelta(days=duration_days),
        )
        ban_repo.add(ban)
        user.is_banned = True
        ban_repo.commit()
        ban_repo.refresh(ban)

        logger.warning(f"Autobanned user {user.id} as spammer (ban #{ban.id})")

        ModActionService.log(
            db,
            f"banned <@{user.name}> for spamming",
            ModActionCategory.USER_BAN,
            system_user,
        )
        NotificationService.notify_autoban(user.id, user.name, ban.id)

        return ban
