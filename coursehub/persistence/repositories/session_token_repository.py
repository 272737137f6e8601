"""Repository for claimed session tokens."""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.persistence.models.session_token import UsedSessionToken

logger = logging.getLogger(__name__)


class SessionTokenRepository:
    """Stores spent session tokens in the database."""

    def __init__(self, session: AsyncSession):
        """Initialize session token repository."""
        self.session = session

    async def is_claimed(self, token_hash: str) -> bool:
        """Check whether a token was already spent."""
        result = await self.session.execute(
            select(UsedSessionToken.token_hash).where(UsedSessionToken.token_hash == token_hash)
        )
        return result.scalar_one_or_none() is not None

    async def claim(self, token_hash: str, user_id: int) -> bool:
        """Record a token as spent.

        Must run before the caller writes anything else: a conflicting
        claim rolls the whole session back.

        Returns:
            True if this call recorded the claim
        """
        if await self.is_claimed(token_hash):
            return False

        self.session.add(
            UsedSessionToken(token_hash=token_hash, user_id=user_id, used_at=datetime.utcnow())
        )
        try:
            await self.session.flush()
        except IntegrityError:
            logger.warning("Concurrent claim of the same session token", extra={"user_id": user_id})
            await self.session.rollback()
            return False
        return True
