"""Repositories."""

from coursehub.persistence.repositories.audit_log_repository import AuditLogRepository
from coursehub.persistence.repositories.base import BaseRepository
from coursehub.persistence.repositories.course_repository import CourseRepository
from coursehub.persistence.repositories.forum_repository import ForumRepository
from coursehub.persistence.repositories.session_token_repository import SessionTokenRepository
from coursehub.persistence.repositories.subscription_repository import SubscriptionRepository
from coursehub.persistence.repositories.user_repository import UserRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "CourseRepository",
    "ForumRepository",
    "SessionTokenRepository",
    "SubscriptionRepository",
    "UserRepository",
]
