"""Course catalog endpoints. Browsing is public, editing is admin-only."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from smart_tutor.dependencies import CurrentUser, get_course_service, require_role
from smart_tutor.schemas.course_schema import (
    CourseCreateRequest,
    CourseResponse,
    CourseUpdateRequest,
    SeedResult,
)
from smart_tutor.schemas.response_schema import ApiResponse, success_response
from smart_tutor.services.course_service import CourseService

router = APIRouter(prefix="/api/v1/courses", tags=["courses"])

CourseServiceDep = Annotated[CourseService, Depends(get_course_service)]
AdminDep = Annotated[CurrentUser, Depends(require_role("admin"))]


@router.get("", response_model=ApiResponse[list[CourseResponse]])
async def list_courses(
    service: CourseServiceDep,
    q: str | None = Query(default=None, max_length=200),
    category: str | None = Query(default=None, max_length=50),
) -> dict:
    """List published courses, optionally filtered by text and category."""
    result = await service.list_courses(query=q, category=category)
    return success_response(result)


@router.get("/{course_id}", response_model=ApiResponse[CourseResponse])
async def get_course(course_id: int, service: CourseServiceDep) -> dict:
    """Get one published course."""
    result = await service.get_course(course_id)
    return success_response(result)


@router.post(
    "",
    response_model=ApiResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_course(
    body: CourseCreateRequest,
    service: CourseServiceDep,
    admin: AdminDep,
) -> dict:
    """Add a course to the catalog."""
    result = await service.create_course(body, tutor_id=admin.id)
    return success_response(result, status=201)


@router.post(
    "/seed",
    response_model=ApiResponse[SeedResult],
    status_code=status.HTTP_201_CREATED,
)
async def seed_courses(service: CourseServiceDep, admin: AdminDep) -> dict:
    """Insert the built-in sample catalog."""
    result = await service.seed_catalog(tutor_id=admin.id)
    return success_response(result, status=201)


@router.patch("/{course_id}", response_model=ApiResponse[CourseResponse])
async def update_course(
    course_id: int,
    body: CourseUpdateRequest,
    service: CourseServiceDep,
    admin: AdminDep,
) -> dict:
    """Edit a course; omitted fields are unchanged."""
    result = await service.update_course(course_id, body)
    return success_response(result)


@router.delete("/{course_id}", response_model=ApiResponse[None])
async def delete_course(
    course_id: int,
    service: CourseServiceDep,
    admin: AdminDep,
) -> dict:
    """Remove a course from the catalog."""
    await service.delete_course(course_id)
    return success_response(None, message="Course deleted")
