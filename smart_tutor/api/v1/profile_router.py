"""Self-service profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from smart_tutor.dependencies import CurrentUser, get_current_user, get_user_service
from smart_tutor.schemas.admin_schema import ProfileUpdateRequest
from smart_tutor.schemas.auth_schema import UserResponse
from smart_tutor.schemas.response_schema import ApiResponse, success_response
from smart_tutor.services.user_service import UserService

router = APIRouter(prefix="/api/v1/profile", tags=["profile"])

UserServiceDep = Annotated[UserService, Depends(get_user_service)]
CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


@router.get("", response_model=ApiResponse[UserResponse])
async def get_profile(service: UserServiceDep, current_user: CurrentUserDep) -> dict:
    """Get the current user's profile."""
    result = await service.get_profile(current_user.id)
    return success_response(result)


@router.patch("", response_model=ApiResponse[UserResponse])
async def update_profile(
    body: ProfileUpdateRequest,
    service: UserServiceDep,
    current_user: CurrentUserDep,
) -> dict:
    """Update the current user's profile."""
    result = await service.update_profile(current_user.id, body)
    return success_response(result)
