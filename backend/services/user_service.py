"""
Service for user lookups shared by the moderation workflow.
"""

from sqlalchemy.orm import Session

from models.config import settings
from models.exceptions import UserNotFoundException
from repositories.db_models import User
from repositories.user_repository import UserRepository


class UserService:
    """Service for user operations."""

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        """
        Get a user by ID.

        Raises:
            UserNotFoundException: If user not found
        """
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            raise UserNotFoundException(f"User with ID {user_id} not found")
        return user

    @staticmethod
    def get_system_user(db: Session) -> User:
        """
        Get the designated system account, creating it if missing.

        Args:
            db: Database session

        Returns:
            The system user named by SYSTEM_USER_NAME
        """
        return UserRepository(db).get_or_create_system_user(settings.SYSTEM_USER_NAME)

    @staticmethod
    def is_system_user(db: Session, user: User) -> bool:
        """Check whether a user is the system account, by identity."""
        return user.id == UserService.get_system_user(db).id
