"""Tests for database initialization."""

from conftest import TestingSessionLocal, engine
from init_db import init_db
from repositories.db_models import ForumTopic, User, UserLevel


def test_seeds_system_user_and_report_topic(db_session) -> None:
    init_db(session_factory=TestingSessionLocal, bind=engine)

    system_user = db_session.query(User).filter(User.name == "System").one()
    topic = db_session.query(ForumTopic).one()
    assert topic.title == "Reports requiring moderation"
    assert topic.min_level == UserLevel.MODERATOR
    assert topic.creator_id == system_user.id


def test_is_idempotent(db_session) -> None:
    init_db(session_factory=TestingSessionLocal, bind=engine)
    init_db(session_factory=TestingSessionLocal, bind=engine)

    assert db_session.query(User).count() == 1
    assert db_session.query(ForumTopic).count() == 1
