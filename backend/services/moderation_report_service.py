"""
Service for moderation report business logic.

Report creation posts a notice to the moderator forum topic and checks
the reported user for spam. Status changes thank the reporter and log a
mod action. All of these run as explicit post-commit effects.
"""

from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from core.correlation import correlation_scope
from models.config import settings
from models.exceptions import (
    DuplicateModerationReportException,
    InsufficientPermissionsException,
    ModerationReportNotFoundException,
    ReportValidationException,
)
from models.schemas import ModerationReportSearch
from repositories.db_models import (
    ModActionCategory,
    ModelType,
    ModerationReport,
    ReportStatus,
    User,
    UserLevel,
)
from repositories.moderation_report_repository import ModerationReportRepository
from services.content_lookup_service import ContentLookupService, ReportedContent
from services.dmail_service import DmailService
from services.forum_service import ForumService
from services.mod_action_service import ModActionService
from services.notification_service import NotificationService
from services.report_effects import ReportEffect, run_effects
from services.spam_detector import SpamDetector
from services.user_service import UserService

REPORT_TOPIC_BODY = (
    "This topic deals with moderation events as reported by Builders. "
    "Reports can be filed against users, comments, or forum posts."
)

_STATUS_MOD_ACTIONS = {
    ReportStatus.HANDLED: ModActionCategory.MODERATION_REPORT_HANDLED,
    ReportStatus.REJECTED: ModActionCategory.MODERATION_REPORT_REJECTED,
}


class ModerationReportService:
    """Service for moderation report operations."""

    @staticmethod
    def model_types() -> list[str]:
        """Names of the content kinds that can be reported."""
        return ContentLookupService.model_types()

    # =========================================================================
    # Creation
    # =========================================================================

    @staticmethod
    def create_report(
        db: Session,
        reason: str,
        model_type: ModelType | str,
        model_id: int,
        creator: User,
    ) -> ModerationReport:
        """
        File a moderation report.

        The report is inserted and committed first. The forum notice, the
        autoban check and the moderator push alert run afterwards; their
        failures are logged and never undo the report.

        Args:
            db: Database session
            reason: Why the content is reported
            model_type: Kind of content ("Dmail", "Comment" or "ForumPost")
            model_id: ID of the content
            creator: Reporting user

        Returns:
            Created report, status pending

        Raises:
            InvalidReportTargetException: If the content kind is not reportable
            ReportValidationException: If the reason is blank or the id invalid
            ReportedContentNotFoundException: If the content does not exist
            DuplicateModerationReportException: If the creator already
                reported this content
        """
        with correlation_scope():
            target = ContentLookupService.parse_target(model_type, model_id)
            reason = ModerationReportService._validate_reason(reason)
            content = ContentLookupService.resolve(db, target)

            report_repo = ModerationReportRepository(db)
            report = ModerationReport(
                reason=reason,
                model_type=target.model_type,
                model_id=target.model_id,
                creator_id=creator.id,
                status=ReportStatus.PENDING,
            )

            # The unique constraint decides duplicates, not a prior read
            try:
                report_repo.insert(report)
                report_repo.commit()
            except IntegrityError as e:
                report_repo.rollback()
                if report_repo.get_by_creator_and_target(creator.id, target):
                    raise DuplicateModerationReportException() from e
                raise

            report_repo.refresh(report)
            report_id = report.id
            logger.info(
                f"User {creator.id} filed modreport #{report_id} "
                f"against {content.shortlink}"
            )

            run_effects(
                db,
                report_id,
                [
                    ReportEffect(
                        "create_forum_post",
                        lambda: ModerationReportService.create_forum_post(
                            db, report, content
                        ),
                    ),
                    ReportEffect(
                        "autoban_reported_user",
                        lambda: ModerationReportService.autoban_reported_user(
                            db, content
                        ),
                    ),
                    ReportEffect(
                        "notify_moderators",
                        lambda: NotificationService.notify_new_report(
                            report_id, content.shortlink, reason, creator.name
                        ),
                    ),
                ],
            )

            return report

    @staticmethod
    def _validate_reason(reason: Optional[str]) -> str:
        if reason is None or not reason.strip():
            raise ReportValidationException("Reason can't be blank")
        return reason.strip()

    @staticmethod
    def forum_topic(db: Session):
        """
        Get the moderator topic that collects report notices, creating it if needed.

        Args:
            db: Database session

        Returns:
            The report topic
        """
        return ForumService.ensure_topic(
            db,
            title=settings.REPORT_TOPIC_TITLE,
            creator=UserService.get_system_user(db),
            min_level=UserLevel.MODERATOR,
            category_id=settings.REPORT_TOPIC_CATEGORY_ID,
            body=REPORT_TOPIC_BODY,
        )

    @staticmethod
    def forum_post_message(
        report: ModerationReport,
        creator: User,
        reported_user: User,
        content: ReportedContent,
    ) -> str:
        """Format the forum notice for a report (DText)."""
        body = content.body
        if len(body) > settings.REPORT_QUOTE_MAX_LENGTH:
            body = body[: settings.REPORT_QUOTE_MAX_LENGTH] + "..."

        return (
            f"[b]Report[/b] modreport #{report.id}\n"
            f"[b]Submitted by[/b] <@{creator.name}>\n"
            f"[b]Submitted against[/b] {content.keyed_shortlink} "
            f"by <@{reported_user.name}>\n"
            f"[b]Reason[/b] {report.reason}\n"
            "\n"
            "[quote]\n"
            f"{body}\n"
            "[/quote]\n"
        )

    @staticmethod
    def create_forum_post(
        db: Session, report: ModerationReport, content: ReportedContent
    ):
        """Post the report notice to the moderator topic as the system user."""
        topic = ModerationReportService.forum_topic(db)
        reported_user = UserService.get_user(db, content.reported_user_id)
        message = ModerationReportService.forum_post_message(
            report, report.creator, reported_user, content
        )
        return ForumService.append_post(
            db, topic, UserService.get_system_user(db), message
        )

    @staticmethod
    def autoban_reported_user(db: Session, content: ReportedContent) -> None:
        """Ban the author of reported content if they qualify as a spammer."""
        reported_user = UserService.get_user(db, content.reported_user_id)
        if SpamDetector.is_spammer(db, reported_user):
            SpamDetector.ban_spammer(db, reported_user)

    @staticmethod
    def reported_user(db: Session, report: ModerationReport) -> User:
        """
        Get the user responsible for the reported content.

        Comments and forum posts resolve to their creator, dmails to the sender.

        Raises:
            ReportedContentNotFoundException: If the content no longer exists
            UnsupportedReportTargetError: If the report's kind has no lookup
        """
        content = ContentLookupService.resolve(db, report.target)
        return UserService.get_user(db, content.reported_user_id)

    # =========================================================================
    # Status changes
    # =========================================================================

    @staticmethod
    def update_status(
        db: Session,
        report_id: int,
        new_status: ReportStatus | str,
        updater: User,
    ) -> ModerationReport:
        """
        Change a report's status.

        Writing the current status again is a no-op. A real transition
        thanks the reporter (first move to handled, unless the reporter is
        the system account) and logs a mod action (handled or rejected).

        Args:
            db: Database session
            report_id: ID of the report
            new_status: Target status
            updater: Moderator performing the change

        Returns:
            The report

        Raises:
            InsufficientPermissionsException: If updater is not a moderator
            ReportValidationException: If the status is unknown
            ModerationReportNotFoundException: If the report does not exist
        """
        with correlation_scope():
            if not updater.is_moderator:
                raise InsufficientPermissionsException(
                    "Only moderators can update moderation reports"
                )

            try:
                status = ReportStatus(new_status)
            except ValueError:
                raise ReportValidationException(
                    f"Invalid report status: {new_status!r}"
                ) from None

            report_repo = ModerationReportRepository(db)
            report = report_repo.get_by_id(report_id)
            if not report:
                raise ModerationReportNotFoundException(report_id)

            previous_status = ReportStatus(report.status)
            if previous_status == status:
                return report

            # Only the writer that wins the compare-and-set runs effects
            if not report_repo.transition_status(report_id, previous_status, status):
                report_repo.refresh(report)
                logger.info(
                    f"modreport #{report_id} changed concurrently, "
                    f"skipping effects of {updater.id}'s update"
                )
                return report

            report_repo.refresh(report)
            logger.info(
                f"User {updater.id} moved modreport #{report_id} "
                f"from {previous_status.value} to {status.value}"
            )

            effects: list[ReportEffect] = []
            if ModerationReportService._should_notify_reporter(
                db, report, previous_status
            ):
                effects.append(
                    ReportEffect(
                        "notify_reporter",
                        lambda: ModerationReportService.notify_reporter(db, report),
                    )
                )
            if status in _STATUS_MOD_ACTIONS:
                effects.append(
                    ReportEffect(
                        "create_mod_action",
                        lambda: ModerationReportService.create_mod_action(
                            db, report, updater
                        ),
                    )
                )

            run_effects(db, report_id, effects)
            return report

    @staticmethod
    def _should_notify_reporter(
        db: Session, report: ModerationReport, previous_status: ReportStatus
    ) -> bool:
        if UserService.is_system_user(db, report.creator):
            return False
        return (
            report.status == ReportStatus.HANDLED
            and previous_status != ReportStatus.HANDLED
        )

    @staticmethod
    def notify_reporter(db: Session, report: ModerationReport):
        """Thank the reporter by dmail for a report that led to action."""
        content = ContentLookupService.resolve(db, report.target)
        return DmailService.create_automated(
            db,
            report.creator,
            title=f"Thank you for reporting {content.shortlink}",
            body=(
                f"Thank you for reporting {content.shortlink}. "
                "Action has been taken against the user."
            ),
        )

    @staticmethod
    def create_mod_action(db: Session, report: ModerationReport, updater: User):
        """Log the handling or rejection of a report."""
        status = ReportStatus(report.status)
        return ModActionService.log(
            db,
            f"{status.value} modreport #{report.id}",
            _STATUS_MOD_ACTIONS[status],
            updater,
        )

    # =========================================================================
    # Queries
    # =========================================================================

    @staticmethod
    def visible(db: Session, user: User) -> Query:
        """
        Reports a user may see.

        Moderators see every report; other users only the reports they filed.

        Returns:
            Lazy query, newest first
        """
        return ModerationReportRepository(db).visible_query(user)

    @staticmethod
    def get_report(
        db: Session, report_id: int, viewer: Optional[User] = None
    ) -> ModerationReport:
        """
        Get a single report, optionally scoped to what a viewer may see.

        Raises:
            ModerationReportNotFoundException: If missing or not visible
        """
        report_repo = ModerationReportRepository(db)
        if viewer is None:
            report = report_repo.get_by_id(report_id)
        else:
            report = (
                report_repo.visible_query(viewer)
                .filter(ModerationReport.id == report_id)
                .first()
            )
        if not report:
            raise ModerationReportNotFoundException(report_id)
        return report

    @staticmethod
    def search(
        db: Session,
        params: ModerationReportSearch,
        viewer: Optional[User] = None,
    ) -> list[ModerationReport]:
        """
        Search reports.

        Args:
            db: Database session
            params: Search criteria
            viewer: When given, only reports visible to this user are searched

        Returns:
            Matching reports, newest first

        Raises:
            ValidationException: If a range expression is malformed
        """
        report_repo = ModerationReportRepository(db)
        base = report_repo.visible_query(viewer) if viewer is not None else None
        return report_repo.search(params, base)

    @staticmethod
    def by_model_type(db: Session, model_type: ModelType) -> Query:
        """Reports against one kind of content, newest first."""
        return ModerationReportRepository(db).by_model_type(model_type)

    @staticmethod
    def recent(db: Session) -> Query:
        """Reports filed within the last REPORT_RECENT_DAYS days."""
        return ModerationReportRepository(db).recent(settings.REPORT_RECENT_DAYS)
