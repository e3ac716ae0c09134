"""
Repository for moderation report operations.
"""

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.orm import Query, Session

from helpers.search_filters import (
    LIKE_ESCAPE,
    parse_timestamp,
    range_clause,
    wildcard_to_like,
)
from repositories.base import BaseRepository
from repositories.db_models import (
    Comment,
    Dmail,
    ForumPost,
    ModelType,
    ModerationReport,
    ReportStatus,
    ReportTarget,
    User,
)

if TYPE_CHECKING:
    from models.schemas import ModerationReportSearch


class ModerationReportRepository(BaseRepository[ModerationReport]):
    """Repository for moderation report data access."""

    def __init__(self, db: Session):
        """
        Initialize moderation report repository.

        Args:
            db: Database session
        """
        super().__init__(ModerationReport, db)

    def insert(self, report: ModerationReport) -> ModerationReport:
        """
        Insert a report and flush it so the unique constraint is checked.

        Args:
            report: New report

        Returns:
            The flushed report with its id assigned

        Raises:
            sqlalchemy.exc.IntegrityError: If the creator already reported the target
        """
        self.db.add(report)
        self.db.flush()
        return report

    def transition_status(
        self, report_id: int, previous: ReportStatus, new: ReportStatus
    ) -> bool:
        """
        Move a report to a new status only if it still has the expected one.

        Args:
            report_id: ID of the report
            previous: Status the caller read
            new: Status to write

        Returns:
            True if this call performed the transition, False if another
            writer changed the status first
        """
        result = self.db.execute(
            update(ModerationReport)
            .where(
                ModerationReport.id == report_id,
                ModerationReport.status == previous,
            )
            .values(status=new, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1

    def get_by_creator_and_target(
        self, creator_id: int, target: ReportTarget
    ) -> ModerationReport | None:
        """
        Get the report a user filed against a piece of content.

        Args:
            creator_id: ID of the reporting user
            target: Reported content

        Returns:
            Existing report if found, None otherwise
        """
        return (
            self.db.query(ModerationReport)
            .filter(
                ModerationReport.creator_id == creator_id,
                ModerationReport.model_type == target.model_type,
                ModerationReport.model_id == target.model_id,
            )
            .first()
        )

    @staticmethod
    def apply_default_order(query: Query) -> Query:
        """Order newest first, ties broken by id."""
        return query.order_by(
            ModerationReport.created_at.desc(), ModerationReport.id.desc()
        )

    def visible_query(self, user: User) -> Query:
        """
        Reports a user may see: all of them for moderators, otherwise their own.

        Args:
            user: Requesting user

        Returns:
            Lazy query in default order
        """
        query = self.db.query(ModerationReport)
        if not user.is_moderator:
            query = query.filter(ModerationReport.creator_id == user.id)
        return self.apply_default_order(query)

    def by_model_type(self, model_type: ModelType) -> Query:
        """
        Reports against one kind of content.

        Args:
            model_type: Content kind

        Returns:
            Lazy query in default order
        """
        query = self.db.query(ModerationReport).filter(
            ModerationReport.model_type == model_type
        )
        return self.apply_default_order(query)

    def recent(self, days: int) -> Query:
        """
        Reports created within the last ``days`` days.

        Args:
            days: Window size

        Returns:
            Lazy query in default order
        """
        since = datetime.now(timezone.utc) - timedelta(days=days)
        query = self.db.query(ModerationReport).filter(
            ModerationReport.created_at >= since
        )
        return self.apply_default_order(query)

    def search(
        self, params: "ModerationReportSearch", base: Query | None = None
    ) -> list[ModerationReport]:
        """
        Search reports.

        Args:
            params: Search criteria
            base: Query to narrow (e.g. a visibility scope); all reports if None

        Returns:
            Matching reports in default order, paginated

        Raises:
            ValidationException: If a range expression is malformed
        """
        query = base if base is not None else self.db.query(ModerationReport)

        if params.id:
            query = query.filter(range_clause(ModerationReport.id, params.id))
        if params.created_at:
            query = query.filter(
                range_clause(
                    ModerationReport.created_at, params.created_at, parse_timestamp
                )
            )
        if params.updated_at:
            query = query.filter(
                range_clause(
                    ModerationReport.updated_at, params.updated_at, parse_timestamp
                )
            )
        if params.reason is not None:
            query = query.filter(ModerationReport.reason == params.reason)
        if params.reason_matches:
            query = query.filter(
                ModerationReport.reason.ilike(
                    wildcard_to_like(params.reason_matches), escape=LIKE_ESCAPE
                )
            )
        if params.creator_id is not None:
            query = query.filter(ModerationReport.creator_id == params.creator_id)
        if params.creator_name:
            creator_ids = select(User.id).where(
                func.lower(User.name) == params.creator_name.lower()
            )
            query = query.filter(ModerationReport.creator_id.in_(creator_ids))
        if params.model_type is not None:
            query = query.filter(ModerationReport.model_type == params.model_type)
        if params.model_id is not None:
            query = query.filter(ModerationReport.model_id == params.model_id)
        if params.status is not None:
            query = query.filter(ModerationReport.status == params.status)

        # Re-apply ordering in case the base query was unordered
        query = self.apply_default_order(query.order_by(None))
        return query.offset(params.skip).limit(params.limit).all()

    def count_distinct_reporters_against_user(
        self, user_id: int, since: datetime
    ) -> int:
        """
        Count distinct users who reported any content authored by a user.

        Covers dmails sent, comments and forum posts written by the user.

        Args:
            user_id: ID of the reported user
            since: Only count reports created at or after this time

        Returns:
            Number of distinct reporters
        """
        dmail_ids = select(Dmail.id).where(Dmail.from_id == user_id)
        comment_ids = select(Comment.id).where(Comment.creator_id == user_id)
        forum_post_ids = select(ForumPost.id).where(ForumPost.creator_id == user_id)

        return (
            self.db.query(func.count(func.distinct(ModerationReport.creator_id)))
            .filter(
                ModerationReport.created_at >= since,
                ModerationReport.creator_id != user_id,
                or_(
                    and_(
                        ModerationReport.model_type == ModelType.DMAIL,
                        ModerationReport.model_id.in_(dmail_ids),
                    ),
                    and_(
                        ModerationReport.model_type == ModelType.COMMENT,
                        ModerationReport.model_id.in_(comment_ids),
                    ),
                    and_(
                        ModerationReport.model_type == ModelType.FORUM_POST,
                        ModerationReport.model_id.in_(forum_post_ids),
                    ),
                ),
            )
            .scalar()
            or 0
        )
