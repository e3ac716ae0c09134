"""
Repository pattern implementation for data access layer.
"""

from .ban_repository import BanRepository
from .base import BaseRepository
from .comment_repository import CommentRepository
from .dmail_repository import DmailRepository
from .forum_repository import ForumPostRepository, ForumTopicRepository
from .mod_action_repository import ModActionRepository
from .moderation_report_repository import ModerationReportRepository
from .user_repository import UserRepository

__all__ = [
    "BanRepository",
    "BaseRepository",
    "CommentRepository",
    "DmailRepository",
    "ForumPostRepository",
    "ForumTopicRepository",
    "ModActionRepository",
    "ModerationReportRepository",
    "UserRepository",
]
