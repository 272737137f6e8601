"""Forum repository for forums, discussions and read tracking."""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.persistence.models.forum import Discussion, Forum, ForumRead

logger = logging.getLogger(__name__)


class ForumRepository:
    """Repository for forum and discussion records.

    Relocation writes only flush; the move service commits them together.
    """

    def __init__(self, session: AsyncSession):
        """Initialize forum repository."""
        self.session = session

    # --- Forum Queries ---

    async def get_forum_by_id(self, forum_id: int) -> Forum | None:
        """Get forum by ID."""
        return await self.session.get(Forum, forum_id)

    # --- Discussion Queries ---

    async def get_discussion_by_id(self, discussion_id: int) -> Discussion | None:
        """Get discussion by ID, reloading columns changed by bulk updates."""
        return await self.session.get(Discussion, discussion_id, populate_existing=True)

    # --- Relocation Writes ---

    async def set_discussion_forum(self, discussion_id: int, forum_id: int) -> None:
        """Point a discussion at a new forum."""
        stmt = (
            update(Discussion)
            .where(Discussion.id == discussion_id)
            .values(forum_id=forum_id)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.execute(stmt)

    async def set_read_tracking_forum(self, discussion_id: int, forum_id: int) -> int:
        """Point every read-tracking row of a discussion at a new forum.

        Returns:
            Number of rows updated
        """
        stmt = (
            update(ForumRead)
            .where(ForumRead.discussion_id == discussion_id)
            .values(forum_id=forum_id)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def get_read_records(self, discussion_id: int) -> list[ForumRead]:
        """Get read-tracking rows for a discussion."""
        stmt = select(ForumRead).where(ForumRead.discussion_id == discussion_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
