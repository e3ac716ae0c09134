"""
Post-commit effects of moderation report changes.

Effects run after the report itself is committed. A failing effect is
logged, reported to Sentry and rolled back on its own; the report stays
persisted and the remaining effects still run.
"""

from typing import Callable, NamedTuple

import sentry_sdk
from loguru import logger
from sqlalchemy.orm import Session

from models.exceptions import UnsupportedReportTargetError
from services.notification_service import NotificationService


class ReportEffect(NamedTuple):
    """A named side effect of a report change."""

    name: str
    run: Callable[[], object]


def run_effects(db: Session, report_id: int, effects: list[ReportEffect]) -> list[str]:
    """
    Run effects in order.

    Args:
        db: Database session the effects write through
        report_id: ID of the report the effects belong to
        effects: Effects to run

    Returns:
        Names of the effects that failed

    Raises:
        UnsupportedReportTargetError: Invariant violations are not absorbed
    """
    failed: list[str] = []

    for effect in effects:
        try:
            effect.run()
        except UnsupportedReportTargetError:
            db.rollback()
            logger.exception(
                f"Effect {effect.name} hit an unsupported target for modreport #{report_id}"
            )
            NotificationService.notify_critical(
                "Moderation report invariant violated",
                f"modreport #{report_id}: {effect.name} found no content lookup",
            )
            raise
        except Exception as e:
            db.rollback()
            logger.exception(f"Effect {effect.name} failed for modreport #{report_id}")
            sentry_sdk.capture_exception(e)
            failed.append(effect.name)
        else:
            logger.debug(f"Effect {effect.name} done for modreport #{report_id}")

    if failed:
        logger.warning(
            f"modreport #{report_id} persisted with failed effects: {', '.join(failed)}"
        )

    return failed
