"""Capability checks and move authorization.

Capability lookups (async, database backed) are collected into a
``MoveGrants`` value first; ``authorize_move`` then decides on plain data.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.domain.exceptions import (
    MoveForbidden,
    TargetNotFound,
    TargetNotVisible,
    UnsupportedForumType,
)
from coursehub.persistence.models.capability import (
    ROLE_CAPABILITIES,
    Capability,
    CapabilityOverride,
)
from coursehub.persistence.models.course import CourseRole
from coursehub.persistence.models.forum import Forum, ForumType
from coursehub.persistence.models.user import User
from coursehub.persistence.repositories.course_repository import CourseRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveGrants:
    """What the caller may do on the two ends of a move."""

    can_move_in_source: bool
    target_visible: bool
    can_start_in_target: bool


class CapabilityChecker:
    """Answer capability questions for a user inside a forum."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.course_repo = CourseRepository(session)

    async def has_capability(self, capability: Capability, forum: Forum, user_id: int) -> bool:
        """Check a capability in a forum's context.

        Site admins hold every capability. Other users need an active
        enrollment in the forum's course; a forum override for their role
        wins over the role default.
        """
        user = await self.session.get(User, user_id)
        if user is None or not user.is_active:
            return False
        if user.is_site_admin:
            return True

        enrollment = await self.course_repo.get_active_enrollment(forum.course_id, user_id)
        if enrollment is None:
            return False

        stmt = select(CapabilityOverride.allowed).where(
            CapabilityOverride.forum_id == forum.id,
            CapabilityOverride.role == enrollment.role,
            CapabilityOverride.capability == capability.value,
        )
        result = await self.session.execute(stmt)
        override = result.scalar_one_or_none()
        if override is not None:
            return override

        try:
            role = CourseRole(enrollment.role)
        except ValueError:
            logger.warning(f"Unknown course role {enrollment.role!r} for user {user_id}")
            return False
        return capability in ROLE_CAPABILITIES.get(role, frozenset())

    async def is_forum_visible(self, forum: Forum, user_id: int) -> bool:
        """Visible forums are visible to everyone; hidden ones need a capability."""
        if forum.is_visible:
            return True
        return await self.has_capability(Capability.VIEW_HIDDEN_ACTIVITIES, forum, user_id)

    async def move_grants(self, source: Forum, target: Forum, user_id: int) -> MoveGrants:
        """Collect every capability a move from source to target depends on."""
        return MoveGrants(
            can_move_in_source=await self.has_capability(
                Capability.MOVE_DISCUSSIONS, source, user_id
            ),
            target_visible=await self.is_forum_visible(target, user_id),
            can_start_in_target=await self.has_capability(
                Capability.START_DISCUSSION, target, user_id
            ),
        )


def authorize_move(source: Forum, target: Forum | None, grants: MoveGrants | None) -> None:
    """Reject a move that may not happen.

    Checks run in a fixed order and the first failure wins.

    Raises:
        TargetNotFound: Target missing or in another course
        MoveForbidden: Caller may not move here or start discussions there
        UnsupportedForumType: Either forum is a single discussion forum
        TargetNotVisible: Target hidden from the caller
    """
    if target is None or grants is None:
        raise TargetNotFound()
    if not grants.can_move_in_source:
        raise MoveForbidden("You are not allowed to move discussions out of this forum")
    if source.forum_type == ForumType.SINGLE:
        raise UnsupportedForumType("Discussions cannot be moved out of a single discussion forum")
    if target.forum_type == ForumType.SINGLE:
        raise UnsupportedForumType("Discussions cannot be moved into a single discussion forum")
    if target.course_id != source.course_id:
        raise TargetNotFound("Target forum is not part of this course")
    if not grants.target_visible:
        raise TargetNotVisible()
    if not grants.can_start_in_target:
        raise MoveForbidden("You are not allowed to start discussions in the target forum")
