"""Audit logging service for tracking discussion moves."""

import logging
from datetime import date, datetime
from typing import Any

from fastapi import Request
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.persistence.models.audit_log import AuditAction
from coursehub.persistence.models.forum import Discussion, Forum
from coursehub.persistence.models.user import User
from coursehub.persistence.repositories.audit_log_repository import AuditLogRepository

logger = logging.getLogger(__name__)


def record_snapshot(instance: Any) -> dict[str, Any]:
    """Copy a model's column values into a JSON-safe dict."""
    snapshot: dict[str, Any] = {}
    for column in inspect(instance).mapper.column_attrs:
        value = getattr(instance, column.key)
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        snapshot[column.key] = value
    return snapshot


class AuditService:
    """Service for creating audit log entries.

    Usage:
        audit = AuditService(db)
        await audit.log_discussion_moved(user, snapshots, source, target, request=request)
    """

    def __init__(self, session: AsyncSession):
        """Initialize audit service."""
        self.repo = AuditLogRepository(session)

    def _extract_client_info(self, request: Request | None) -> tuple[str | None, str | None]:
        """Extract IP address and user agent from request."""
        if request is None:
            return None, None

        # Get IP from X-Forwarded-For header (for proxied requests) or client host
        ip_address = request.headers.get("X-Forwarded-For")
        if ip_address:
            # Take the first IP in the chain (original client)
            ip_address = ip_address.split(",")[0].strip()
        else:
            ip_address = request.client.host if request.client else None

        user_agent = request.headers.get("User-Agent")

        return ip_address, user_agent

    async def log(
        self,
        action: AuditAction | str,
        user: User | None = None,
        course_id: int | None = None,
        context_forum_id: int | None = None,
        resource_type: str | None = None,
        resource_id: int | None = None,
        details: dict[str, Any] | None = None,
        snapshots: dict[str, Any] | None = None,
        request: Request | None = None,
    ) -> None:
        """Create an audit log entry.

        Args:
            action: The action being logged
            user: The user performing the action (optional)
            course_id: Course the action happened in
            context_forum_id: Forum whose context authorized the action
            resource_type: Type of resource affected
            resource_id: ID of the specific resource
            details: Additional action-specific details
            snapshots: Pre-change record copies
            request: FastAPI request for extracting IP/user agent
        """
        ip_address, user_agent = self._extract_client_info(request)

        try:
            await self.repo.create(
                action=action,
                user_id=user.id if user else None,
                user_email=user.email if user else None,
                course_id=course_id,
                context_forum_id=context_forum_id,
                resource_type=resource_type,
                resource_id=resource_id,
                details=details,
                snapshots=snapshots,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        except Exception as e:
            # Don't let audit logging failures break the application
            logger.error(f"Failed to create audit log: {e}")

    async def log_discussion_moved(
        self,
        user: User,
        discussion_snapshot: dict[str, Any],
        source: Forum | dict[str, Any],
        target: Forum | dict[str, Any],
        details: dict[str, Any] | None = None,
        request: Request | None = None,
    ) -> None:
        """Log a discussion moving between forums.

        Snapshots describe the records as they were before the move.
        """
        source_snapshot = source if isinstance(source, dict) else record_snapshot(source)
        target_snapshot = target if isinstance(target, dict) else record_snapshot(target)
        await self.log(
            action=AuditAction.DISCUSSION_MOVED,
            user=user,
            course_id=discussion_snapshot.get("course_id"),
            context_forum_id=target_snapshot["id"],
            resource_type="discussion",
            resource_id=discussion_snapshot["id"],
            details={
                "from_forum_id": source_snapshot["id"],
                "to_forum_id": target_snapshot["id"],
                **(details or {}),
            },
            snapshots={
                Discussion.__tablename__: discussion_snapshot,
                Forum.__tablename__: [source_snapshot, target_snapshot],
            },
            request=request,
        )
