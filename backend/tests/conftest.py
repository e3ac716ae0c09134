"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["ENVIRONMENT"] = "test"
os.environ["NTFY_ENABLED"] = "false"

from repositories.database import Base, enable_sqlite_savepoints  # noqa: E402
import repositories.db_models as db_models  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = enable_sqlite_savepoints(
    create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


def _make_user(db_session, name: str, level: int) -> db_models.User:
    user = db_models.User(name=name, level=level)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def make_user(db_session):
    """Factory creating users at a given level."""

    def factory(name: str, level: int = db_models.UserLevel.MEMBER):
        return _make_user(db_session, name, level)

    return factory


@pytest.fixture
def system_user(db_session) -> db_models.User:
    """The system account that posts report notices."""
    return _make_user(db_session, "System", db_models.UserLevel.ADMIN)


@pytest.fixture
def reporter(db_session) -> db_models.User:
    """A regular member who files reports."""
    return _make_user(db_session, "reporter", db_models.UserLevel.MEMBER)


@pytest.fixture
def author(db_session) -> db_models.User:
    """A regular member whose content gets reported."""
    return _make_user(db_session, "author", db_models.UserLevel.MEMBER)


@pytest.fixture
def moderator(db_session) -> db_models.User:
    """A moderator who reviews reports."""
    return _make_user(db_session, "moderator", db_models.UserLevel.MODERATOR)


@pytest.fixture
def gold_author(db_session) -> db_models.User:
    """A gold-level member, never treated as a spammer."""
    return _make_user(db_session, "gold_author", db_models.UserLevel.GOLD)


@pytest.fixture
def comment(db_session, author) -> db_models.Comment:
    """A comment written by the author."""
    comment = db_models.Comment(creator_id=author.id, body="buy cheap watches")
    db_session.add(comment)
    db_session.commit()
    db_session.refresh(comment)
    return comment


@pytest.fixture
def dmail(db_session, author, reporter) -> db_models.Dmail:
    """A dmail sent by the author to the reporter."""
    dmail = db_models.Dmail(
        from_id=author.id,
        to_id=reporter.id,
        title="hello",
        body="click this link",
    )
    db_session.add(dmail)
    db_session.commit()
    db_session.refresh(dmail)
    return dmail


@pytest.fixture
def forum_post(db_session, author) -> db_models.ForumPost:
    """A forum post written by the author in a general topic."""
    topic = db_models.ForumTopic(title="General", creator_id=author.id)
    db_session.add(topic)
    db_session.flush()
    post = db_models.ForumPost(
        topic_id=topic.id, creator_id=author.id, body="spam in the forum"
    )
    db_session.add(post)
    db_session.commit()
    db_session.refresh(post)
    return post


@pytest.fixture(autouse=True)
def no_push_notifications(monkeypatch):
    """Keep tests from reaching a real ntfy server."""
    from services.notification_service import NotificationService

    sent: list[tuple] = []

    def record(notification_type, title, message, click_url=None, priority_override=None):
        sent.append((notification_type, title, message))

    monkeypatch.setattr(
        NotificationService, "send_fire_and_forget", staticmethod(record)
    )
    return sent
