"""Base repository with course-scoped queries."""

from typing import Generic, TypeVar, Type
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with course-scoped query methods.

    Writes are flushed, never committed: the calling service owns the
    transaction boundary.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize repository with model and session."""
        self.model = model
        self.session = session

    async def get_by_id(self, course_id: int | None, id: int) -> ModelType | None:
        """Get entity by ID, scoped to course when the model has one."""
        stmt = select(self.model).where(self.model.id == id)
        if course_id is not None and hasattr(self.model, "course_id"):
            stmt = stmt.where(self.model.course_id == course_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
