"""Capabilities and per-forum permission overrides."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from coursehub.persistence.database import Base
from coursehub.persistence.models.course import CourseRole


class Capability(str, Enum):
    """Forum capabilities checked by discussion actions."""

    VIEW_DISCUSSION = "forum:viewdiscussion"
    START_DISCUSSION = "forum:startdiscussion"
    MOVE_DISCUSSIONS = "forum:movediscussions"
    VIEW_HIDDEN_ACTIVITIES = "course:viewhiddenactivities"


# Role archetype defaults, used when no override exists for the forum
ROLE_CAPABILITIES: dict[CourseRole, frozenset[Capability]] = {
    CourseRole.GUEST: frozenset({Capability.VIEW_DISCUSSION}),
    CourseRole.STUDENT: frozenset({
        Capability.VIEW_DISCUSSION,
        Capability.START_DISCUSSION,
    }),
    CourseRole.TEACHER: frozenset({
        Capability.VIEW_DISCUSSION,
        Capability.START_DISCUSSION,
        Capability.VIEW_HIDDEN_ACTIVITIES,
    }),
    CourseRole.EDITING_TEACHER: frozenset({
        Capability.VIEW_DISCUSSION,
        Capability.START_DISCUSSION,
        Capability.MOVE_DISCUSSIONS,
        Capability.VIEW_HIDDEN_ACTIVITIES,
    }),
    CourseRole.MANAGER: frozenset(Capability),
}


class CapabilityOverride(Base):
    """Allow or prohibit one capability for one role inside one forum."""

    __tablename__ = "forum_capability_overrides"
    __table_args__ = (
        UniqueConstraint("forum_id", "role", "capability", name="uq_forum_role_capability"),
    )

    id = Column(Integer, primary_key=True, index=True)
    forum_id = Column(
        Integer, ForeignKey("forums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = Column(String(50), nullable=False)
    capability = Column(String(100), nullable=False)
    allowed = Column(Boolean, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
