"""
Repository for moderator action log entries.
"""

from typing import Optional

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import ModAction, ModActionCategory


class ModActionRepository(BaseRepository[ModAction]):
    """Repository for mod action data access."""

    def __init__(self, db: Session):
        super().__init__(ModAction, db)

    def get_actions(
        self,
        category: Optional[ModActionCategory] = None,
        creator_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ModAction]:
        """
        Get logged actions, newest first.

        Args:
            category: Filter by category
            creator_id: Filter by acting user
            skip: Pagination offset
            limit: Pagination limit

        Returns:
            List of mod actions
        """
        query = self.db.query(ModAction)

        if category:
            query = query.filter(ModAction.category == category)
        if creator_id:
            query = query.filter(ModAction.creator_id == creator_id)

        return (
            query.order_by(ModAction.created_at.desc(), ModAction.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
