"""Course repository: enrollments."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coursehub.persistence.models.course import Course, Enrollment
from coursehub.persistence.repositories.base import BaseRepository


class CourseRepository(BaseRepository[Course]):
    """Repository for Course entities and their enrollments."""

    def __init__(self, session: AsyncSession):
        """Initialize course repository."""
        super().__init__(Course, session)

    async def get_active_enrollment(self, course_id: int, user_id: int) -> Enrollment | None:
        """Get a user's active enrollment in a course."""
        stmt = select(Enrollment).where(
            Enrollment.course_id == course_id,
            Enrollment.user_id == user_id,
            Enrollment.is_active.is_(True),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
