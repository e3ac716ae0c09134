"""
Services layer for business logic.

This package contains service modules that encapsulate the moderation
report workflow and the collaborators it drives.
"""

from .content_lookup_service import ContentLookupService
from .dmail_service import DmailService
from .forum_service import ForumService
from .mod_action_service import ModActionService
from .moderation_report_service import ModerationReportService
from .notification_service import NotificationService
from .spam_detector import SpamDetector
from .user_service import UserService

__all__ = [
    "ContentLookupService",
    "DmailService",
    "ForumService",
    "ModActionService",
    "ModerationReportService",
    "NotificationService",
    "SpamDetector",
    "UserService",
]
