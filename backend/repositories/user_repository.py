"""
Repository for user operations.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import User, UserLevel


class UserRepository(BaseRepository[User]):
    """Repository for user data access."""

    def __init__(self, db: Session):
        """
        Initialize user repository.

        Args:
            db: Database session
        """
        super().__init__(User, db)

    def get_system_account(self, name: str) -> User | None:
        """
        Get the system account by exact name.

        Only an admin-level account qualifies, so a member whose name merely
        looks like the system name is never picked.

        Args:
            name: Configured system account name

        Returns:
            System user if found, None otherwise
        """
        return (
            self.db.query(User)
            .filter(User.name == name, User.level == UserLevel.ADMIN)
            .first()
        )

    def get_or_create_system_user(self, name: str) -> User:
        """
        Get the system account, creating it on first use.

        Creation runs inside a SAVEPOINT; if a concurrent caller created the
        account first, the unique name constraint fails and the existing row
        is returned instead.

        Args:
            name: Configured system account name

        Returns:
            The system user

        Raises:
            sqlalchemy.exc.IntegrityError: If a non-admin account holds the name
        """
        user = self.get_system_account(name)
        if user:
            return user

        try:
            with self.db.begin_nested():
                user = User(name=name, level=UserLevel.ADMIN)
                self.db.add(user)
        except IntegrityError:
            user = self.get_system_account(name)
            if user is None:
                raise
            return user

        self.db.commit()
        self.db.refresh(user)
        return user
