"""
Repositories for forum topics and posts.
"""

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import ForumPost, ForumTopic


class ForumTopicRepository(BaseRepository[ForumTopic]):
    """Repository for forum topic data access."""

    def __init__(self, db: Session):
        super().__init__(ForumTopic, db)

    def get_by_title(self, title: str) -> ForumTopic | None:
        """
        Get topic by its exact title.

        Args:
            title: Topic title

        Returns:
            Topic if found, None otherwise
        """
        return self.db.query(ForumTopic).filter(ForumTopic.title == title).first()


class ForumPostRepository(BaseRepository[ForumPost]):
    """Repository for forum post data access."""

    def __init__(self, db: Session):
        super().__init__(ForumPost, db)
