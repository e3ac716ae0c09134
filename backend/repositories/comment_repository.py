"""
Repository for comment operations.
"""

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import Comment


class CommentRepository(BaseRepository[Comment]):
    """Repository for comment data access."""

    def __init__(self, db: Session):
        super().__init__(Comment, db)
