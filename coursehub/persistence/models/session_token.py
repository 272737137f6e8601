"""Claimed one-time session tokens."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from coursehub.persistence.database import Base


class UsedSessionToken(Base):
    """A session token that has already been spent.

    Holds claims when Redis is unavailable. The row is written in the
    caller's transaction, so a move that rolls back releases its token.
    """

    __tablename__ = "used_session_tokens"

    token_hash = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    used_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<UsedSessionToken(user_id={self.user_id}, used_at={self.used_at})>"
