"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

Covers moderation reports and the content they can target (dmails,
comments, forum posts), plus the users, bans and moderator actions the
report workflow touches.
"""

import enum
from datetime import datetime, timezone
from typing import List, NamedTuple, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repositories.database import Base


class UserLevel(enum.IntEnum):
    """Account levels; higher levels include the privileges of lower ones."""

    RESTRICTED = 10
    MEMBER = 20
    GOLD = 30
    PLATINUM = 31
    BUILDER = 32
    MODERATOR = 40
    ADMIN = 50


# Moderation Report Enums


class ModelType(str, enum.Enum):
    """Kinds of content a moderation report can target."""

    DMAIL = "Dmail"
    COMMENT = "Comment"
    FORUM_POST = "ForumPost"


class ReportStatus(str, enum.Enum):
    """Review status of a moderation report."""

    PENDING = "pending"
    REJECTED = "rejected"
    HANDLED = "handled"


class ModActionCategory(str, enum.Enum):
    """Categories of logged moderator actions."""

    MODERATION_REPORT_HANDLED = "moderation_report_handled"
    MODERATION_REPORT_REJECTED = "moderation_report_rejected"
    USER_BAN = "user_ban"


class ReportTarget(NamedTuple):
    """A typed reference to reportable content."""

    model_type: ModelType
    model_id: int


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    level: Mapped[int] = mapped_column(
        Integer, default=UserLevel.MEMBER, nullable=False
    )
    is_banned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    # Relationships
    comments: Mapped[List["Comment"]] = relationship(
        "Comment", back_populates="creator"
    )
    bans: Mapped[List["Ban"]] = relationship(
        "Ban", back_populates="user", foreign_keys="[Ban.user_id]"
    )

    @property
    def is_gold(self) -> bool:
        return self.level >= UserLevel.GOLD

    @property
    def is_moderator(self) -> bool:
        return self.level >= UserLevel.MODERATOR


class Dmail(Base):
    """A direct message between two users."""

    __tablename__ = "dmails"
    __table_args__ = (
        Index("ix_dmails_from_created", "from_id", "created_at"),
        Index("ix_dmails_to", "to_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    from_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    to_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_spam: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_automated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    # Relationships
    sender: Mapped["User"] = relationship("User", foreign_keys=[from_id])
    recipient: Mapped["User"] = relationship("User", foreign_keys=[to_id])


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_creator_created", "creator_id", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    creator_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    # Relationships
    creator: Mapped["User"] = relationship("User", back_populates="comments")


class ForumTopic(Base):
    """
    A forum thread.

    Titles are unique so that on-demand creation of well-known topics is
    safe under concurrent first use.
    """

    __tablename__ = "forum_topics"
    __table_args__ = (UniqueConstraint("title", name="uq_forum_topic_title"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    creator_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    category_id: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    min_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    response_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    # Relationships
    creator: Mapped["User"] = relationship("User")
    posts: Mapped[List["ForumPost"]] = relationship(
        "ForumPost", back_populates="topic", order_by="ForumPost.id"
    )


class ForumPost(Base):
    __tablename__ = "forum_posts"
    __table_args__ = (
        Index("ix_forum_posts_topic", "topic_id"),
        Index("ix_forum_posts_creator_created", "creator_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    topic_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("forum_topics.id"), nullable=False
    )
    creator_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    # Relationships
    topic: Mapped["ForumTopic"] = relationship("ForumTopic", back_populates="posts")
    creator: Mapped["User"] = relationship("User")


# ============================================================================
# Moderation Models
# ============================================================================


class ModerationReport(Base):
    """
    A user-filed complaint against a dmail, comment or forum post.

    Reports are unique per (creator_id, model_type, model_id): a user may
    report the same content at most once.
    """

    __tablename__ = "moderation_reports"
    __table_args__ = (
        UniqueConstraint(
            "creator_id",
            "model_type",
            "model_id",
            name="uq_moderation_report_creator_model",
        ),
        Index("ix_moderation_reports_model", "model_type", "model_id"),
        Index("ix_moderation_reports_status", "status"),
        Index("ix_moderation_reports_created", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    model_type: Mapped[ModelType] = mapped_column(Enum(ModelType), nullable=False)
    model_id: Mapped[int] = mapped_column(Integer, nullable=False)
    creator_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus), default=ReportStatus.PENDING, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    # Relationships
    creator: Mapped["User"] = relationship("User", backref="moderation_reports")

    @property
    def target(self) -> ReportTarget:
        return ReportTarget(ModelType(self.model_type), self.model_id)


class ModAction(Base):
    """Append-only log of moderator actions."""

    __tablename__ = "mod_actions"
    __table_args__ = (
        Index("ix_mod_actions_category", "category"),
        Index("ix_mod_actions_creator", "creator_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    creator_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[ModActionCategory] = mapped_column(
        Enum(ModActionCategory), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    # Relationships
    creator: Mapped["User"] = relationship("User")


class Ban(Base):
    """A ban placed on a user account."""

    __tablename__ = "bans"
    __table_args__ = (
        Index("ix_bans_user", "user_id"),
        Index("ix_bans_expires", "expires_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    banner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    # Relationships
    user: Mapped["User"] = relationship(
        "User", back_populates="bans", foreign_keys=[user_id]
    )
    banner: Mapped["User"] = relationship("User", foreign_keys=[banner_id])
