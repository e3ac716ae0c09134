"""
Service for forum topics and posts.
"""

from datetime import datetime, timezone
from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from repositories.db_models import ForumPost, ForumTopic, User
from repositories.forum_repository import ForumPostRepository, ForumTopicRepository


class ForumService:
    """Service for forum operations."""

    @staticmethod
    def find_topic_by_title(db: Session, title: str) -> Optional[ForumTopic]:
        """Find a topic by exact title."""
        return ForumTopicRepository(db).get_by_title(title)

    @staticmethod
    def ensure_topic(
        db: Session,
        title: str,
        creator: User,
        min_level: int,
        category_id: int = 0,
        body: Optional[str] = None,
    ) -> ForumTopic:
        """
        Find a topic by title, creating it if it does not exist.

        Creation happens inside a SAVEPOINT and relies on the unique title
        constraint: when a concurrent caller wins the race, the insert fails
        and the caller's topic is reused. At most one topic per title exists.

        Args:
            db: Database session
            title: Topic title
            creator: Author of a newly created topic
            min_level: Minimum user level required to view the topic
            category_id: Forum category
            body: Opening post of a newly created topic

        Returns:
            The existing or newly created topic
        """
        topic_repo = ForumTopicRepository(db)

        topic = topic_repo.get_by_title(title)
        if topic:
            return topic

        try:
            return ForumService.create_topic(
                db, title, creator, min_level, category_id=category_id, body=body
            )
        except IntegrityError:
            logger.info(f"Forum topic '{title}' was created concurrently, reusing it")
            existing = topic_repo.get_by_title(title)
            if existing is None:
                raise
            return existing

    @staticmethod
    def create_topic(
        db: Session,
        title: str,
        creator: User,
        min_level: int,
        category_id: int = 0,
        body: Optional[str] = None,
    ) -> ForumTopic:
        """
        Create a topic, with an optional opening post.

        The insert runs inside a SAVEPOINT so a title collision only undoes
        this topic.

        Raises:
            sqlalchemy.exc.IntegrityError: If a topic with the title exists
        """
        with db.begin_nested():
            topic = ForumTopic(
                title=title,
                creator_id=creator.id,
                category_id=category_id,
                min_level=min_level,
            )
            db.add(topic)
            db.flush()
            if body:
                db.add(ForumPost(topic_id=topic.id, creator_id=creator.id, body=body))

        db.commit()
        db.refresh(topic)
        logger.info(f"Created forum topic #{topic.id} '{title}'")
        return topic

    @staticmethod
    def append_post(db: Session, topic: ForumTopic, creator: User, body: str) -> ForumPost:
        """
        Append a reply to a topic and bump it.

        Args:
            db: Database session
            topic: Topic to reply to
            creator: Post author
            body: Post body (DText)

        Returns:
            Created post
        """
        post_repo = ForumPostRepository(db)

        post = ForumPost(topic_id=topic.id, creator_id=creator.id, body=body)
        post_repo.add(post)

        topic.response_count = (topic.response_count or 0) + 1
        topic.updated_at = datetime.now(timezone.utc)

        post_repo.commit()
        post_repo.refresh(post)
        return post
