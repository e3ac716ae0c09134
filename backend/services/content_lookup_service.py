"""
Resolution of reportable content.

A report targets a dmail, a comment or a forum post. Every kind is
resolved through one dispatch table, so callers never branch on the
content class themselves.
"""

import hashlib
import hmac
from typing import Any, NamedTuple

from sqlalchemy.orm import Session

from models.config import settings
from models.exceptions import (
    InvalidReportTargetException,
    ReportedContentNotFoundException,
    ReportValidationException,
    UnsupportedReportTargetError,
)
from repositories.base import BaseRepository
from repositories.comment_repository import CommentRepository
from repositories.db_models import ModelType, ReportTarget
from repositories.dmail_repository import DmailRepository
from repositories.forum_repository import ForumPostRepository

# Length of the hex digest appended to keyed dmail links
DMAIL_KEY_LENGTH = 16


class ReportedContent(NamedTuple):
    """The parts of reported content the report workflow needs."""

    target: ReportTarget
    body: str
    reported_user_id: int
    shortlink: str
    keyed_shortlink: str


class _ContentLookup(NamedTuple):
    repository: type[BaseRepository[Any]]
    author_attribute: str
    shortlink_prefix: str
    keyed: bool


_LOOKUPS: dict[ModelType, _ContentLookup] = {
    ModelType.DMAIL: _ContentLookup(DmailRepository, "from_id", "dmail", True),
    ModelType.COMMENT: _ContentLookup(CommentRepository, "creator_id", "comment", False),
    ModelType.FORUM_POST: _ContentLookup(
        ForumPostRepository, "creator_id", "forum", False
    ),
}


def dmail_key(dmail_id: int) -> str:
    """
    Compute the access key for a dmail link.

    The key lets moderators open a dmail they are not party to.
    """
    digest = hmac.new(
        settings.SECRET_KEY.encode("utf-8"),
        f"dmail:{dmail_id}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return digest[:DMAIL_KEY_LENGTH]


class ContentLookupService:
    """Service for resolving report targets."""

    @staticmethod
    def model_types() -> list[str]:
        """Names of the reportable content kinds."""
        return [model_type.value for model_type in ModelType]

    @staticmethod
    def parse_target(model_type: ModelType | str, model_id: int) -> ReportTarget:
        """
        Build a typed report target from raw input.

        Args:
            model_type: Content kind, as enum or its name ("Dmail", ...)
            model_id: ID of the content

        Returns:
            Report target

        Raises:
            InvalidReportTargetException: If the kind is not reportable
            ReportValidationException: If the id is not a positive integer
        """
        try:
            parsed_type = ModelType(model_type)
        except ValueError:
            raise InvalidReportTargetException(model_type) from None

        if isinstance(model_id, bool) or not isinstance(model_id, int) or model_id < 1:
            raise ReportValidationException(f"Invalid model id: {model_id!r}")

        return ReportTarget(parsed_type, model_id)

    @staticmethod
    def resolve(db: Session, target: ReportTarget) -> ReportedContent:
        """
        Load reported content.

        Args:
            db: Database session
            target: Report target

        Returns:
            Reported content summary

        Raises:
            ReportedContentNotFoundException: If the content does not exist
            UnsupportedReportTargetError: If no lookup exists for the kind
        """
        lookup = _LOOKUPS.get(target.model_type)
        if lookup is None:
            raise UnsupportedReportTargetError(target.model_type)

        content = lookup.repository(db).get_by_id(target.model_id)
        if content is None:
            raise ReportedContentNotFoundException(
                ModelType(target.model_type).value, target.model_id
            )

        shortlink = f"{lookup.shortlink_prefix} #{content.id}"
        keyed_shortlink = (
            f"{shortlink}/{dmail_key(content.id)}" if lookup.keyed else shortlink
        )

        return ReportedContent(
            target=target,
            body=content.body,
            reported_user_id=getattr(content, lookup.author_attribute),
            shortlink=shortlink,
            keyed_shortlink=keyed_shortlink,
        )
