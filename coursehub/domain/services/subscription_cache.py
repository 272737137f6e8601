"""Per-pass cache of subscription preferences."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.persistence.repositories.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)


class SubscriptionCacheMiss(LookupError):
    """Raised when a forum is looked up before it was filled."""


class SubscriptionCache:
    """Subscription rows of a set of forums, loaded up front.

    Lookups never hit the database. A forum must be filled before it is
    read, so every lookup in one pass sees the same snapshot.
    """

    def __init__(self, session: AsyncSession):
        self.repo = SubscriptionRepository(session)
        # forum_id -> {user_id: subscribed}
        self._forum_preferences: dict[int, dict[int, bool]] = {}
        # forum_id -> {(user_id, discussion_id): subscribed}
        self._discussion_preferences: dict[int, dict[tuple[int, int], bool]] = {}

    async def fill(self, forum_id: int) -> None:
        """Load every subscription row of a forum, replacing earlier data."""
        forum_rows = await self.repo.get_forum_subscriptions(forum_id)
        discussion_rows = await self.repo.get_discussion_subscriptions_for_forum(forum_id)

        self._forum_preferences[forum_id] = {
            row.user_id: row.subscribed for row in forum_rows
        }
        self._discussion_preferences[forum_id] = {
            (row.user_id, row.discussion_id): row.subscribed for row in discussion_rows
        }
        logger.debug(
            f"Filled subscription cache for forum {forum_id}: "
            f"{len(forum_rows)} forum rows, {len(discussion_rows)} discussion rows"
        )

    def invalidate(self, forum_id: int) -> None:
        """Forget the rows of a forum."""
        self._forum_preferences.pop(forum_id, None)
        self._discussion_preferences.pop(forum_id, None)

    def is_filled(self, forum_id: int) -> bool:
        return forum_id in self._forum_preferences

    def forum_preference(self, user_id: int, forum_id: int) -> bool | None:
        """Explicit forum-level preference, or None when the user has no row."""
        return self._rows(self._forum_preferences, forum_id).get(user_id)

    def discussion_preference(
        self, user_id: int, forum_id: int, discussion_id: int
    ) -> bool | None:
        """Explicit per-discussion preference, or None when the user has no row."""
        return self._rows(self._discussion_preferences, forum_id).get((user_id, discussion_id))

    @staticmethod
    def _rows(store: dict, forum_id: int) -> dict:
        try:
            return store[forum_id]
        except KeyError:
            raise SubscriptionCacheMiss(
                f"Subscription cache not filled for forum {forum_id}"
            ) from None
