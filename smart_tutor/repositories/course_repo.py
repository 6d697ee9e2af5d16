"""Course repository for catalog database operations."""

from typing import Any

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from smart_tutor.models.course import Course


class CourseRepository:
    """Encapsulates course catalog queries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, course_id: int) -> Course | None:
        """Find a course by primary key."""
        result = await self._session.execute(
            select(Course).where(Course.id == course_id)
        )
        return result.scalar_one_or_none()

    async def search(
        self,
        query: str | None = None,
        category: str | None = None,
        published_only: bool = True,
    ) -> list[Course]:
        """List courses newest first with optional text and category filters."""
        stmt = select(Course)
        if published_only:
            stmt = stmt.where(Course.is_published.is_(True))
        if category:
            stmt = stmt.where(Course.category == category)
        if query:
            pattern = f"%{query.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Course.title).like(pattern),
                    func.lower(func.coalesce(Course.description, "")).like(pattern),
                )
            )
        result = await self._session.execute(
            stmt.order_by(Course.created_at.desc(), Course.id.desc())
        )
        return list(result.scalars().all())

    async def create(self, **values: Any) -> Course:
        """Insert a single course."""
        course = Course(**values)
        self._session.add(course)
        await self._session.flush()
        await self._session.refresh(course)
        return course

    async def find_by_slug(self, slug: str) -> Course | None:
        """Find a course by its slug."""
        result = await self._session.execute(select(Course).where(Course.slug == slug))
        return result.scalar_one_or_none()

    async def find_slugs(self) -> set[str]:
        """Return every slug in use."""
        result = await self._session.execute(
            select(Course.slug).where(Course.slug.is_not(None))
        )
        return set(result.scalars().all())

    async def create_bulk(self, courses: list[Course]) -> None:
        """Insert several courses in one batch."""
        self._session.add_all(courses)
        await self._session.flush()

    async def update_fields(self, course_id: int, **values: Any) -> None:
        """Update the given columns of a course."""
        if not values:
            return
        await self._session.execute(
            update(Course).where(Course.id == course_id).values(**values)
        )

    async def delete(self, course_id: int) -> None:
        """Hard-delete a course."""
        await self._session.execute(delete(Course).where(Course.id == course_id))
