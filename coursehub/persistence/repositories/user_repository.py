"""User repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.persistence.models.user import User
from coursehub.persistence.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entities."""

    def __init__(self, session: AsyncSession):
        """Initialize user repository."""
        super().__init__(User, session)
