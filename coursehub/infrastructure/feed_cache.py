"""Cached RSS documents per forum, stored in Redis."""

import logging

from coursehub.infrastructure.redis import RedisClient, redis_client
from coursehub.persistence.models.forum import Forum
from coursehub.settings import settings

logger = logging.getLogger(__name__)


class FeedCache:
    """Cache of rendered forum feeds.

    Feeds are regenerated on the next read after invalidation.
    """

    def __init__(self, redis: RedisClient | None = None, prefix: str | None = None) -> None:
        self.redis = redis or redis_client
        self.prefix = prefix or settings.feed_cache_prefix

    def key_for(self, forum_id: int) -> str:
        return f"{self.prefix}{forum_id}"

    async def get(self, forum_id: int) -> str | None:
        """Get the cached feed document of a forum."""
        return await self.redis.get(self.key_for(forum_id))

    async def store(self, forum_id: int, document: str, ttl: int | None = None) -> bool:
        """Cache a rendered feed document."""
        return await self.redis.set(self.key_for(forum_id), document, ttl)

    async def invalidate(self, forum: Forum) -> None:
        """Drop the cached feed of a forum so it is rebuilt."""
        deleted = await self.redis.delete(self.key_for(forum.id))
        logger.debug(f"Invalidated feed for forum {forum.id} (deleted={deleted})")
