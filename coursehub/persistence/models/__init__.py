"""Database models."""

from coursehub.persistence.models.audit_log import AuditAction, AuditLog
from coursehub.persistence.models.capability import Capability, CapabilityOverride
from coursehub.persistence.models.course import (
    Course,
    CourseGroup,
    CourseGroupMembership,
    CourseRole,
    Enrollment,
)
from coursehub.persistence.models.forum import (
    ALL_GROUPS,
    Discussion,
    DiscussionSubscription,
    Forum,
    ForumPost,
    ForumRead,
    ForumSubscription,
    ForumType,
    SubscriptionMode,
)
from coursehub.persistence.models.session_token import UsedSessionToken
from coursehub.persistence.models.user import User

__all__ = [
    "ALL_GROUPS",
    "AuditAction",
    "AuditLog",
    "Capability",
    "CapabilityOverride",
    "Course",
    "CourseGroup",
    "CourseGroupMembership",
    "CourseRole",
    "Discussion",
    "DiscussionSubscription",
    "Enrollment",
    "Forum",
    "ForumPost",
    "ForumRead",
    "ForumSubscription",
    "ForumType",
    "SubscriptionMode",
    "UsedSessionToken",
    "User",
]
