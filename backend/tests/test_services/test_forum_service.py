"""Tests for ForumService."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from repositories.db_models import ForumPost, ForumTopic, UserLevel
from services.forum_service import ForumService


class TestEnsureTopic:
    """Test on-demand topic creation."""

    def test_creates_topic_with_intro_post(self, db_session, system_user) -> None:
        topic = ForumService.ensure_topic(
            db_session,
            "Reports",
            system_user,
            UserLevel.MODERATOR,
            category_id=3,
            body="Intro",
        )

        assert topic.id is not None
        assert topic.min_level == UserLevel.MODERATOR
        assert topic.category_id == 3
        assert [post.body for post in topic.posts] == ["Intro"]
        assert topic.response_count == 0

    def test_returns_existing_topic(self, db_session, system_user) -> None:
        first = ForumService.ensure_topic(
            db_session, "Reports", system_user, UserLevel.MODERATOR, body="Intro"
        )
        second = ForumService.ensure_topic(
            db_session, "Reports", system_user, UserLevel.MODERATOR, body="Intro"
        )

        assert first.id == second.id
        assert db_session.query(ForumTopic).count() == 1
        assert db_session.query(ForumPost).count() == 1

    def test_concurrent_creation_reuses_winner(self, db_session, system_user) -> None:
        """If another writer created the topic after our lookup, theirs is used."""
        winner = ForumTopic(title="Reports", creator_id=system_user.id)
        db_session.add(winner)
        db_session.commit()

        with patch(
            "services.forum_service.ForumTopicRepository.get_by_title",
            side_effect=[None, winner],
        ):
            topic = ForumService.ensure_topic(
                db_session, "Reports", system_user, UserLevel.MODERATOR
            )

        assert topic.id == winner.id
        assert db_session.query(ForumTopic).count() == 1


class TestAppendPost:
    """Test replies."""

    def test_appends_and_bumps(self, db_session, system_user) -> None:
        topic = ForumService.ensure_topic(
            db_session, "Reports", system_user, UserLevel.MODERATOR
        )
        before = topic.updated_at

        post = ForumService.append_post(db_session, topic, system_user, "hello")

        assert post.topic_id == topic.id
        assert post.body == "hello"
        db_session.refresh(topic)
        assert topic.response_count == 1
        assert topic.updated_at >= before
        posts = (
            db_session.query(ForumPost).filter(ForumPost.topic_id == topic.id).all()
        )
        assert [p.body for p in posts] == ["hello"]

    def test_find_topic_by_title(self, db_session, system_user) -> None:
        assert ForumService.find_topic_by_title(db_session, "Reports") is None
        topic = ForumService.ensure_topic(
            db_session, "Reports", system_user, UserLevel.MODERATOR
        )
        assert ForumService.find_topic_by_title(db_session, "Reports").id == topic.id


class TestCreateTopic:
    """Test direct topic creation."""

    def test_duplicate_title_fails(self, db_session, system_user) -> None:
        ForumService.create_topic(db_session, "Reports", system_user, 0)

        with pytest.raises(IntegrityError):
            ForumService.create_topic(db_session, "Reports", system_user, 0)
        db_session.rollback()

        assert db_session.query(ForumTopic).count() == 1
