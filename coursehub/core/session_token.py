"""One-time session tokens for state-changing discussion actions.

A token is bound to one user, signed with the server secret, expires after
``session_token_ttl_seconds`` and can be consumed exactly once. Replaying a
consumed token (double submit, back navigation) is rejected.
"""

import hashlib
import hmac
import logging
import secrets
import time

from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.infrastructure.redis import RedisClient, redis_client
from coursehub.persistence.repositories.session_token_repository import SessionTokenRepository
from coursehub.settings import settings

logger = logging.getLogger(__name__)

_CLAIM_KEY_PREFIX = "session-token:used:"


def generate_session_token(user_id: int, secret: str, issued_at: int | None = None) -> str:
    """Generate a signed session token for a user.

    Args:
        user_id: User the token is bound to
        secret: Signing secret
        issued_at: Unix timestamp, defaults to now

    Returns:
        Token string of the form ``user.issued.nonce.signature``
    """
    issued = int(time.time()) if issued_at is None else issued_at
    nonce = secrets.token_urlsafe(12)
    payload = f"{user_id}.{issued}.{nonce}"
    return f"{payload}.{_sign(payload, secret)}"


def _sign(payload: str, secret: str) -> str:
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


class SessionTokenGuard:
    """Issues and consumes one-time session tokens."""

    def __init__(
        self,
        redis: RedisClient | None = None,
        secret: str | None = None,
        ttl_seconds: int | None = None,
    ) -> None:
        self.redis = redis or redis_client
        self.secret = secret or settings.session_token_secret
        self.ttl_seconds = ttl_seconds or settings.session_token_ttl_seconds

    def issue(self, user_id: int) -> str:
        """Issue a fresh token for a user."""
        return generate_session_token(user_id, self.secret)

    def verify(self, user_id: int, token: str, now: float | None = None) -> bool:
        """Check signature, owner and age without consuming the token."""
        try:
            owner, issued, nonce, signature = token.split(".")
            owner_id = int(owner)
            issued_at = int(issued)
        except (AttributeError, ValueError):
            return False

        expected = _sign(f"{owner}.{issued}.{nonce}", self.secret)
        if not hmac.compare_digest(expected, signature):
            return False
        if owner_id != user_id:
            return False

        current = time.time() if now is None else now
        return 0 <= current - issued_at <= self.ttl_seconds

    async def consume(
        self, user_id: int, token: str, session: AsyncSession | None = None
    ) -> bool:
        """Verify a token and claim it so it cannot be used again.

        The claim goes to Redis when it is connected, otherwise to the
        database through ``session``. With neither available every token is
        refused.

        Returns:
            True if the token was valid and had not been used before
        """
        if not self.verify(user_id, token):
            logger.info("Rejected session token", extra={"user_id": user_id})
            return False

        signature = token.rsplit(".", 1)[-1]
        if self.redis.available:
            claimed = await self.redis.set_nx(
                f"{_CLAIM_KEY_PREFIX}{signature}", str(user_id), ttl=self.ttl_seconds
            )
        elif session is not None:
            claimed = await SessionTokenRepository(session).claim(signature, user_id)
        else:
            logger.error(
                "No store for session token claims, refusing token",
                extra={"user_id": user_id},
            )
            return False

        if not claimed:
            logger.warning("Session token replayed", extra={"user_id": user_id})
        return claimed
