"""Audit log repository."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.persistence.models.audit_log import AuditAction, AuditLog


class AuditLogRepository:
    """Repository for audit log operations.

    Entries are flushed into the caller's transaction so an audit row is
    committed together with the change it describes.
    """

    def __init__(self, session: AsyncSession):
        """Initialize audit log repository."""
        self.session = session

    async def create(
        self,
        action: str | AuditAction,
        user_id: int | None = None,
        user_email: str | None = None,
        course_id: int | None = None,
        context_forum_id: int | None = None,
        resource_type: str | None = None,
        resource_id: int | None = None,
        details: dict[str, Any] | None = None,
        snapshots: dict[str, Any] | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuditLog:
        """Create a new audit log entry.

        Args:
            action: The action being logged (AuditAction enum or string)
            user_id: ID of user performing the action
            user_email: Email of user (denormalized for historical record)
            course_id: Course the action happened in
            context_forum_id: Forum whose context the action was authorized in
            resource_type: Type of resource affected (e.g., "discussion")
            resource_id: ID of the specific resource
            details: Additional action-specific details as JSON
            snapshots: Pre-change record copies keyed by table name
            ip_address: Client IP address
            user_agent: Client user agent string

        Returns:
            The created AuditLog entry
        """
        action_str = action.value if isinstance(action, AuditAction) else action

        audit_log = AuditLog(
            action=action_str,
            user_id=user_id,
            user_email=user_email,
            course_id=course_id,
            context_forum_id=context_forum_id,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details,
            snapshots=snapshots,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        self.session.add(audit_log)
        await self.session.flush()
        return audit_log

    async def list_by_resource(
        self,
        resource_type: str,
        resource_id: int,
        action: str | None = None,
    ) -> list[AuditLog]:
        """List audit logs for one resource, newest first."""
        stmt = select(AuditLog).where(
            AuditLog.resource_type == resource_type,
            AuditLog.resource_id == resource_id,
        )

        if action:
            stmt = stmt.where(AuditLog.action == action)

        stmt = stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
