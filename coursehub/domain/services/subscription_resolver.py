"""Effective subscription status of a user for a forum or discussion."""

from typing import Callable

from coursehub.domain.services.subscription_cache import SubscriptionCache
from coursehub.persistence.models.forum import Forum, SubscriptionMode

# (user_id, forum) -> whether enrollment alone subscribes the user
EnrolledDefault = Callable[[int, Forum], bool]


class SubscriptionStateResolver:
    """Resolve effective subscription status from a filled cache.

    Precedence: per-discussion row, then forum-level row, then the forum's
    default subscription mode.
    """

    def __init__(
        self,
        cache: SubscriptionCache,
        enrolled_default: EnrolledDefault | None = None,
    ) -> None:
        self.cache = cache
        self.enrolled_default = enrolled_default

    def is_subscribed(
        self, user_id: int, forum: Forum, discussion_id: int | None = None
    ) -> bool:
        """Whether the user receives posts of the forum (or one discussion of it).

        Raises:
            SubscriptionCacheMiss: If the forum was not filled
        """
        if discussion_id is not None:
            preference = self.cache.discussion_preference(user_id, forum.id, discussion_id)
            if preference is not None:
                return preference

        preference = self.cache.forum_preference(user_id, forum.id)
        if preference is not None:
            return preference

        return self.forum_default(user_id, forum)

    def forum_default(self, user_id: int, forum: Forum) -> bool:
        """Fallback status when the user has no explicit row."""
        mode = forum.mode
        if mode == SubscriptionMode.FORCED:
            return True
        if mode in (SubscriptionMode.DISABLED, SubscriptionMode.OPTIONAL):
            return False
        if mode == SubscriptionMode.AUTOMATIC:
            if self.enrolled_default is None:
                return False
            return self.enrolled_default(user_id, forum)
        raise ValueError(f"Unhandled subscription mode: {mode}")
