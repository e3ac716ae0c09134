"""Tests for SpamDetector."""

from datetime import datetime, timedelta, timezone

from models.notification_types import NotificationType
from repositories.db_models import (
    Ban,
    ModAction,
    ModActionCategory,
    ModelType,
    ModerationReport,
)
from services.spam_detector import AUTOBAN_REASON, SpamDetector


def _reports_against(db_session, make_user, comment, count, created_at=None):
    for i in range(count):
        reporter = make_user(f"witness{i}")
        db_session.add(
            ModerationReport(
                reason="spam",
                model_type=ModelType.COMMENT,
                model_id=comment.id,
                creator_id=reporter.id,
                created_at=created_at or datetime.now(timezone.utc),
            )
        )
    db_session.commit()


class TestIsSpammer:
    """Test spammer classification."""

    def test_below_threshold(self, db_session, make_user, author, comment) -> None:
        _reports_against(db_session, make_user, comment, 9)
        assert SpamDetector.is_spammer(db_session, author) is False

    def test_at_threshold(self, db_session, make_user, author, comment) -> None:
        _reports_against(db_session, make_user, comment, 10)
        assert SpamDetector.is_spammer(db_session, author) is True

    def test_threshold_is_configurable(
        self, db_session, make_user, author, comment, monkeypatch
    ) -> None:
        monkeypatch.setattr("services.spam_detector.settings.AUTOBAN_THRESHOLD", 2)
        _reports_against(db_session, make_user, comment, 2)
        assert SpamDetector.is_spammer(db_session, author) is True

    def test_reports_outside_window_ignored(
        self, db_session, make_user, author, comment
    ) -> None:
        _reports_against(
            db_session,
            make_user,
            comment,
            10,
            created_at=datetime.now(timezone.utc) - timedelta(days=2),
        )
        assert SpamDetector.is_spammer(db_session, author) is False

    def test_gold_users_never_spammers(
        self, db_session, make_user, gold_author
    ) -> None:
        from repositories.db_models import Comment

        comment = Comment(creator_id=gold_author.id, body="popular opinion")
        db_session.add(comment)
        db_session.commit()

        _reports_against(db_session, make_user, comment, 12)
        assert SpamDetector.is_spammer(db_session, gold_author) is False


class TestBanSpammer:
    """Test automatic bans."""

    def test_bans_and_logs(
        self, db_session, system_user, author, no_push_notifications
    ) -> None:
        ban = SpamDetector.ban_spammer(db_session, author)

        assert ban is not None
        assert ban.user_id == author.id
        assert ban.banner_id == system_user.id
        assert ban.reason == AUTOBAN_REASON
        assert ban.expires_at is not None
        db_session.refresh(author)
        assert author.is_banned is True

        action = db_session.query(ModAction).one()
        assert action.category == ModActionCategory.USER_BAN
        assert action.description == "banned <@author> for spamming"
        assert action.creator_id == system_user.id

        assert [entry[0] for entry in no_push_notifications] == [
            NotificationType.AUTOBAN
        ]

    def test_already_banned_user_skipped(self, db_session, author) -> None:
        author.is_banned = True
        db_session.commit()

        assert SpamDetector.ban_spammer(db_session, author) is None
        assert db_session.query(Ban).count() == 0
