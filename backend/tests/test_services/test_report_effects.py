"""Tests for post-commit report effects."""

from unittest.mock import Mock, patch

import pytest

from models.exceptions import UnsupportedReportTargetError
from models.notification_types import NotificationType
from services.report_effects import ReportEffect, run_effects


def test_runs_effects_in_order(db_session) -> None:
    calls: list[str] = []

    failed = run_effects(
        db_session,
        1,
        [
            ReportEffect("first", lambda: calls.append("first")),
            ReportEffect("second", lambda: calls.append("second")),
        ],
    )

    assert calls == ["first", "second"]
    assert failed == []


def test_failure_is_absorbed_and_reported(db_session) -> None:
    """A failing effect is sent to Sentry and later effects still run."""
    error = RuntimeError("collaborator down")
    later = Mock()

    with patch("services.report_effects.sentry_sdk.capture_exception") as capture:
        failed = run_effects(
            db_session,
            7,
            [
                ReportEffect("broken", Mock(side_effect=error)),
                ReportEffect("later", later),
            ],
        )

    assert failed == ["broken"]
    later.assert_called_once()
    capture.assert_called_once_with(error)


def test_unsupported_target_is_fatal(db_session, no_push_notifications) -> None:
    later = Mock()

    with pytest.raises(UnsupportedReportTargetError):
        run_effects(
            db_session,
            3,
            [
                ReportEffect(
                    "lookup", Mock(side_effect=UnsupportedReportTargetError("Upload"))
                ),
                ReportEffect("later", later),
            ],
        )

    later.assert_not_called()
    assert [entry[0] for entry in no_push_notifications] == [
        NotificationType.CRITICAL
    ]
