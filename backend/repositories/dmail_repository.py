"""
Repository for direct message operations.
"""

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from repositories.db_models import Dmail


class DmailRepository(BaseRepository[Dmail]):
    """Repository for dmail data access."""

    def __init__(self, db: Session):
        super().__init__(Dmail, db)
