"""moderation reports

Revision ID: 0001_moderation_reports
Revises:
Create Date: 2026-10-18 00:00:00.000000

Creates users, content tables (dmails, comments, forum topics and posts),
moderation reports, mod actions and bans.
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001_moderation_reports"
down_revision = None
branch_labels = None
depends_on = None

MODEL_TYPES = ("DMAIL", "COMMENT", "FORUM_POST")
REPORT_STATUSES = ("PENDING", "REJECTED", "HANDLED")
MOD_ACTION_CATEGORIES = (
    "MODERATION_REPORT_HANDLED",
    "MODERATION_REPORT_REJECTED",
    "USER_BAN",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("is_banned", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_name", "users", ["name"], unique=True)

    op.create_table(
        "dmails",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("from_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("to_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("is_spam", sa.Boolean(), nullable=False),
        sa.Column("is_automated", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_dmails_id", "dmails", ["id"])
    op.create_index("ix_dmails_from_created", "dmails", ["from_id", "created_at"])
    op.create_index("ix_dmails_to", "dmails", ["to_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "creator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_comments_id", "comments", ["id"])
    op.create_index(
        "ix_comments_creator_created", "comments", ["creator_id", "created_at"]
    )

    op.create_table(
        "forum_topics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "creator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("min_level", sa.Integer(), nullable=False),
        sa.Column("response_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("title", name="uq_forum_topic_title"),
    )
    op.create_index("ix_forum_topics_id", "forum_topics", ["id"])

    op.create_table(
        "forum_posts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "topic_id", sa.Integer(), sa.ForeignKey("forum_topics.id"), nullable=False
        ),
        sa.Column(
            "creator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_forum_posts_id", "forum_posts", ["id"])
    op.create_index("ix_forum_posts_topic", "forum_posts", ["topic_id"])
    op.create_index(
        "ix_forum_posts_creator_created", "forum_posts", ["creator_id", "created_at"]
    )

    op.create_table(
        "moderation_reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column(
            "model_type", sa.Enum(*MODEL_TYPES, name="modeltype"), nullable=False
        ),
        sa.Column("model_id", sa.Integer(), nullable=False),
        sa.Column(
            "creator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column(
            "status", sa.Enum(*REPORT_STATUSES, name="reportstatus"), nullable=False
        ),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint(
            "creator_id",
            "model_type",
            "model_id",
            name="uq_moderation_report_creator_model",
        ),
    )
    op.create_index("ix_moderation_reports_id", "moderation_reports", ["id"])
    op.create_index(
        "ix_moderation_reports_model", "moderation_reports", ["model_type", "model_id"]
    )
    op.create_index("ix_moderation_reports_status", "moderation_reports", ["status"])
    op.create_index(
        "ix_moderation_reports_created", "moderation_reports", ["created_at"]
    )

    op.create_table(
        "mod_actions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "creator_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "category",
            sa.Enum(*MOD_ACTION_CATEGORIES, name="modactioncategory"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_mod_actions_id", "mod_actions", ["id"])
    op.create_index("ix_mod_actions_category", "mod_actions", ["category"])
    op.create_index("ix_mod_actions_creator", "mod_actions", ["creator_id"])

    op.create_table(
        "bans",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "banner_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("duration_days", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_bans_id", "bans", ["id"])
    op.create_index("ix_bans_user", "bans", ["user_id"])
    op.create_index("ix_bans_expires", "bans", ["expires_at"])


def downgrade() -> None:
    """Drop all report tables.

    WARNING: This results in data loss.
    """
    op.drop_table("bans")
    op.drop_table("mod_actions")
    op.drop_table("moderation_reports")
    op.drop_table("forum_posts")
    op.drop_table("forum_topics")
    op.drop_table("comments")
    op.drop_table("dmails")
    op.drop_table("users")
