"""Audit log model for tracking discussion moves and other sensitive operations."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from coursehub.persistence.database import Base


class AuditAction(str, Enum):
    """Types of auditable actions."""

    DISCUSSION_MOVED = "discussion_moved"


class AuditLog(Base):
    """Audit log entry.

    Records who did what, when, from where, and a snapshot of the records
    as they were before the change.
    """

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)

    # Who performed the action
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    user_email = Column(String(255), nullable=True)  # Denormalized for historical records

    # Where it happened
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=True, index=True)
    context_forum_id = Column(Integer, nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # What resource was affected
    resource_type = Column(String(100), nullable=True)  # e.g., "discussion"
    resource_id = Column(Integer, nullable=True)

    # Additional context
    details = Column(JSON, nullable=True)  # Action-specific details
    snapshots = Column(JSON, nullable=True)  # Pre-change copies of affected records
    ip_address = Column(String(45), nullable=True)  # IPv4 or IPv6
    user_agent = Column(Text, nullable=True)

    # When
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Relationships (optional, for lookups)
    user = relationship("User", foreign_keys=[user_id])

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, action={self.action}, "
            f"user_id={self.user_id}, resource_id={self.resource_id})>"
        )
