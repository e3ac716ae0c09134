"""
Repository for user bans.
"""

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import Ban


class BanRepository(BaseRepository[Ban]):
    """Repository for ban data access."""

    def __init__(self, db: Session):
        super().__init__(Ban, db)
