"""Image generator and learner dashboard endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from smart_tutor.dependencies import (
    CurrentUser,
    get_chat_repository,
    get_image_repository,
    get_image_service,
    require_role,
)
from smart_tutor.repositories.chat_repo import ChatRepository
from smart_tutor.repositories.image_repo import ImageRepository
from smart_tutor.schemas.image_schema import (
    DashboardStats,
    GeneratedImageResponse,
    GenerateImageRequest,
)
from smart_tutor.schemas.response_schema import (
    ApiResponse,
    RelayErrorResponse,
    success_response,
)
from smart_tutor.services.image_service import ImageService

router = APIRouter(
    prefix="/api/v1",
    tags=["images"],
)

ImageServiceDep = Annotated[ImageService, Depends(get_image_service)]
LearnerDep = Annotated[CurrentUser, Depends(require_role("user", "admin"))]


@router.post(
    "/images",
    response_model=ApiResponse[GeneratedImageResponse],
    status_code=status.HTTP_201_CREATED,
    responses={code: {"model": RelayErrorResponse} for code in (402, 429, 500)},
)
async def generate_image(
    body: GenerateImageRequest,
    service: ImageServiceDep,
    user: LearnerDep,
) -> dict:
    """Generate an image from a text prompt and keep it in the gallery."""
    result = await service.generate(body.prompt)
    return success_response(result, status=201)


@router.get("/images", response_model=ApiResponse[list[GeneratedImageResponse]])
async def list_images(service: ImageServiceDep, user: LearnerDep) -> dict:
    """List the current user's generated images, newest first."""
    result = await service.list_images()
    return success_response(result)


@router.delete("/images/{image_id}", response_model=ApiResponse[None])
async def delete_image(
    image_id: int,
    service: ImageServiceDep,
    user: LearnerDep,
) -> dict:
    """Delete one of the current user's images."""
    await service.delete_image(image_id)
    return success_response(None, message="Image deleted")


@router.get("/dashboard", response_model=ApiResponse[DashboardStats], tags=["dashboard"])
async def dashboard(
    user: LearnerDep,
    chat_repo: ChatRepository = Depends(get_chat_repository),
    image_repo: ImageRepository = Depends(get_image_repository),
) -> dict:
    """Activity counters for the current user."""
    stats = DashboardStats(
        chat_sessions=await chat_repo.count_sessions_by_user(user.id),
        generated_images=await image_repo.count_by_user(user.id),
    )
    return success_response(stats)
