"""Service for logging moderator actions."""

import json
from datetime import datetime, timezone
from typing import Optional

from loguru import logger
from sqlalchemy.orm import Session

from repositories.db_models import ModAction, ModActionCategory, User
from repositories.mod_action_repository import ModActionRepository


class ModActionService:
    """Service for the moderator action log."""

    @staticmethod
    def log(
        db: Session,
        description: str,
        category: ModActionCategory,
        actor: User,
    ) -> ModAction:
        """
        Record a moderator action.

        The entry is persisted and mirrored to the application log.

        Args:
            db: Database session
            description: Human-readable description (DText)
            category: Action category
            actor: User who performed the action

        Returns:
            Created mod action
        """
        action = ModActionRepository(db).create(
            ModAction(
                description=description,
                category=category,
                creator_id=actor.id,
            )
        )

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "mod_action_id": action.id,
            "user_id": actor.id,
            "category": category.value,
            "description": description,
        }
        logger.info(f"MODACTION: {json.dumps(log_entry)}")

        return action

    @staticmethod
    def list_actions(
        db: Session,
        category: Optional[ModActionCategory] = None,
        creator_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ModAction]:
        """List logged actions, newest first."""
        return ModActionRepository(db).get_actions(category, creator_id, skip, limit)
