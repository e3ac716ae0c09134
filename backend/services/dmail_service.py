"""
Service for automated direct messages.
"""

from loguru import logger
from sqlalchemy.orm import Session

from repositories.db_models import Dmail, User
from repositories.dmail_repository import DmailRepository
from services.user_service import UserService


class DmailService:
    """Service for dmail operations."""

    @staticmethod
    def create_automated(db: Session, to_user: User, title: str, body: str) -> Dmail:
        """
        Send a dmail from the system account.

        Args:
            db: Database session
            to_user: Recipient
            title: Message title
            body: Message body (DText)

        Returns:
            Created dmail
        """
        system_user = UserService.get_system_user(db)

        dmail = Dmail(
            from_id=system_user.id,
            to_id=to_user.id,
            title=title,
            body=body,
            is_automated=True,
        )
        created = DmailRepository(db).create(dmail)

        logger.info(f"Sent automated dmail #{created.id} to user {to_user.id}")
        return created
