"""Course catalog service."""

import structlog

from smart_tutor.core.exceptions import CourseNotFoundError, CourseSlugTakenError
from smart_tutor.models.course import Course
from smart_tutor.repositories.course_repo import CourseRepository
from smart_tutor.schemas.course_schema import (
    CourseCreateRequest,
    CourseResponse,
    CourseUpdateRequest,
    SeedResult,
)

logger = structlog.get_logger()

CATALOG: tuple[dict[str, str], ...] = (
    {
        "slug": "mathematics",
        "title": "Introduction to Mathematics",
        "description": "Master the fundamentals of algebra, geometry, and calculus with our comprehensive course.",
        "category": "Mathematics",
        "image_url": "https://images.unsplash.com/photo-1635070041078-e363dbe005cb?w=400",
    },
    {
        "slug": "physics",
        "title": "Physics Fundamentals",
        "description": "Explore the laws of motion, energy, and forces that govern our universe.",
        "category": "Science",
        "image_url": "https://images.unsplash.com/photo-1636466497217-26a8cbeaf0aa?w=400",
    },
    {
        "slug": "english-literature",
        "title": "English Literature",
        "description": "Dive into classic and contemporary works of literature and improve your analytical skills.",
        "category": "Language",
        "image_url": "https://images.unsplash.com/photo-1481627834876-b7833e8f5570?w=400",
    },
    {
        "slug": "computer-science",
        "title": "Computer Science Basics",
        "description": "Learn programming concepts, algorithms, and computational thinking.",
        "category": "Technology",
        "image_url": "https://images.unsplash.com/photo-1517694712202-14dd9538aa97?w=400",
    },
    {
        "slug": "world-history",
        "title": "World History",
        "description": "Journey through time and explore the events that shaped our world.",
        "category": "History",
        "image_url": "https://images.unsplash.com/photo-1461360370896-922624d12a74?w=400",
    },
    {
        "slug": "chemistry",
        "title": "Chemistry Essentials",
        "description": "Understand chemical reactions, periodic table, and molecular structures.",
        "category": "Science",
        "image_url": "https://images.unsplash.com/photo-1532634922-8fe0b757fb13?w=400",
    },
)


class CourseService:
    """Browsing for everyone, editing for admins."""

    def __init__(self, course_repo: CourseRepository) -> None:
        self._course_repo = course_repo

    async def list_courses(
        self,
        query: str | None = None,
        category: str | None = None,
        include_unpublished: bool = False,
    ) -> list[CourseResponse]:
        courses = await self._course_repo.search(
            query=query.strip() if query else None,
            category=None if category in (None, "All") else category,
            published_only=not include_unpublished,
        )
        return [CourseResponse.model_validate(c) for c in courses]

    async def get_course(self, course_id: int, include_unpublished: bool = False) -> CourseResponse:
        course = await self._course_repo.find_by_id(course_id)
        if course is None or (not course.is_published and not include_unpublished):
            raise CourseNotFoundError
        return CourseResponse.model_validate(course)

    async def create_course(self, request: CourseCreateRequest, tutor_id: int) -> CourseResponse:
        await self._ensure_slug_free(request.slug)
        course = await self._course_repo.create(**request.model_dump(), tutor_id=tutor_id)
        logger.info("Course created", course_id=course.id, tutor_id=tutor_id)
        return CourseResponse.model_validate(course)

    async def update_course(self, course_id: int, request: CourseUpdateRequest) -> CourseResponse:
        if await self._course_repo.find_by_id(course_id) is None:
            raise CourseNotFoundError
        await self._ensure_slug_free(request.slug, course_id=course_id)
        await self._course_repo.update_fields(course_id, **request.model_dump(exclude_unset=True))
        return await self.get_course(course_id, include_unpublished=True)

    async def delete_course(self, course_id: int) -> None:
        if await self._course_repo.find_by_id(course_id) is None:
            raise CourseNotFoundError
        await self._course_repo.delete(course_id)
        logger.info("Course deleted", course_id=course_id)

    async def seed_catalog(self, tutor_id: int) -> SeedResult:
        """Insert the built-in catalog as published courses.

        Courses whose slug is already present are skipped, so seeding twice
        inserts nothing the second time.
        """
        existing = await self._course_repo.find_slugs()
        missing = [entry for entry in CATALOG if entry["slug"] not in existing]
        if missing:
            await self._course_repo.create_bulk(
                [Course(**entry, is_published=True, tutor_id=tutor_id) for entry in missing]
            )
        logger.info(
            "Course catalog seeded",
            inserted=len(missing),
            skipped=len(CATALOG) - len(missing),
        )
        return SeedResult(inserted=len(missing))

    async def _ensure_slug_free(self, slug: str | None, course_id: int | None = None) -> None:
        if slug is None:
            return
        owner = await self._course_repo.find_by_slug(slug)
        if owner is not None and owner.id != course_id:
            raise CourseSlugTakenError
