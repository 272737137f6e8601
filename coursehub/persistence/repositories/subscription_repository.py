"""Subscription repository: forum and discussion subscription rows."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.persistence.models.course import CourseGroupMembership, Enrollment
from coursehub.persistence.models.forum import (
    DiscussionSubscription,
    Forum,
    ForumSubscription,
    SubscriptionMode,
)
from coursehub.persistence.models.user import User

logger = logging.getLogger(__name__)


class SubscriptionRepository:
    """Repository for subscription preferences."""

    def __init__(self, session: AsyncSession):
        """Initialize subscription repository."""
        self.session = session

    # --- Row Queries ---

    async def get_forum_subscriptions(self, forum_id: int) -> list[ForumSubscription]:
        """Get all forum-level rows of a forum."""
        stmt = select(ForumSubscription).where(ForumSubscription.forum_id == forum_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_discussion_subscriptions_for_forum(
        self, forum_id: int
    ) -> list[DiscussionSubscription]:
        """Get all per-discussion rows belonging to a forum."""
        stmt = select(DiscussionSubscription).where(DiscussionSubscription.forum_id == forum_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_discussion_subscriptions(
        self, discussion_id: int
    ) -> list[DiscussionSubscription]:
        """Get all per-discussion rows of one discussion."""
        stmt = select(DiscussionSubscription).where(
            DiscussionSubscription.discussion_id == discussion_id
        ).order_by(DiscussionSubscription.user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # --- Subscriber Enumeration ---

    async def fetch_subscribed_users(
        self,
        forum: Forum,
        group_id: int = 0,
        include_discussion_subscriptions: bool = False,
    ) -> list[User]:
        """List the users who may currently receive posts from a forum.

        Forced forums yield every active enrollee. Other forums yield users
        with a forum-level opt-in and, when requested, users who opted into
        any single discussion of the forum. Only active enrollees of the
        forum's course are returned; a positive group_id restricts the
        result to that group's members.

        Args:
            forum: Forum to inspect
            group_id: Course group to restrict to, 0 for all groups
            include_discussion_subscriptions: Also include per-discussion opt-ins

        Returns:
            Users ordered by email
        """
        enrolled = select(Enrollment.user_id).where(
            Enrollment.course_id == forum.course_id,
            Enrollment.is_active.is_(True),
        )
        if group_id and group_id > 0:
            enrolled = enrolled.join(
                CourseGroupMembership, CourseGroupMembership.user_id == Enrollment.user_id
            ).where(CourseGroupMembership.group_id == group_id)

        stmt = select(User).where(User.id.in_(enrolled), User.is_active.is_(True))

        if forum.mode != SubscriptionMode.FORCED:
            forum_subscribers = select(ForumSubscription.user_id).where(
                ForumSubscription.forum_id == forum.id,
                ForumSubscription.subscribed.is_(True),
            )
            conditions = [User.id.in_(forum_subscribers)]
            if include_discussion_subscriptions:
                discussion_subscribers = select(DiscussionSubscription.user_id).where(
                    DiscussionSubscription.forum_id == forum.id,
                    DiscussionSubscription.subscribed.is_(True),
                )
                conditions.append(User.id.in_(discussion_subscribers))
            stmt = stmt.where(or_(*conditions))

        stmt = stmt.order_by(User.email)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # --- Writes ---

    async def delete_discussion_subscriptions(self, discussion_id: int) -> int:
        """Delete every per-discussion row of a discussion.

        Returns:
            Number of rows deleted
        """
        stmt = delete(DiscussionSubscription).where(
            DiscussionSubscription.discussion_id == discussion_id
        ).execution_options(synchronize_session="fetch")
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def create_discussion_subscription(
        self,
        user_id: int,
        forum_id: int,
        discussion_id: int,
        subscribed: bool,
        preference_at: datetime,
    ) -> DiscussionSubscription:
        """Record an explicit per-discussion preference.

        forum_id must be the forum the discussion lives in.
        """
        row = DiscussionSubscription(
            user_id=user_id,
            forum_id=forum_id,
            discussion_id=discussion_id,
            subscribed=subscribed,
            preference_at=preference_at,
        )
        self.session.add(row)
        await self.session.flush()
        return row
