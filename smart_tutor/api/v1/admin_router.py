"""Admin back-office: user management and tutor knowledge."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from smart_tutor.dependencies import (
    CurrentUser,
    get_knowledge_service,
    get_user_service,
    require_role,
)
from smart_tutor.schemas.admin_schema import (
    AdminUserUpdateRequest,
    BotKnowledgeResponse,
    BotKnowledgeUpdateRequest,
    RoleUpdateRequest,
)
from smart_tutor.schemas.auth_schema import UserResponse
from smart_tutor.schemas.response_schema import ApiResponse, success_response
from smart_tutor.services.knowledge_service import KnowledgeService
from smart_tutor.services.user_service import UserService

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

AdminDep = Annotated[CurrentUser, Depends(require_role("admin"))]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
KnowledgeServiceDep = Annotated[KnowledgeService, Depends(get_knowledge_service)]


@router.get("/users", response_model=ApiResponse[list[UserResponse]])
async def list_users(
    service: UserServiceDep,
    admin: AdminDep,
    q: str | None = Query(default=None, max_length=200),
) -> dict:
    """List users, optionally filtered by name or email."""
    result = await service.list_users(q)
    return success_response(result)


@router.patch("/users/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(
    user_id: int,
    body: AdminUserUpdateRequest,
    service: UserServiceDep,
    admin: AdminDep,
) -> dict:
    """Edit a user's profile or suspend/verify the account."""
    result = await service.admin_update(user_id, body)
    return success_response(result)


@router.put("/users/{user_id}/role", response_model=ApiResponse[UserResponse])
async def change_role(
    user_id: int,
    body: RoleUpdateRequest,
    service: UserServiceDep,
    admin: AdminDep,
) -> dict:
    """Grant or revoke the admin role."""
    result = await service.change_role(user_id, body.role, admin_id=admin.id)
    return success_response(result)


@router.delete("/users/{user_id}", response_model=ApiResponse[None])
async def delete_user(
    user_id: int,
    service: UserServiceDep,
    admin: AdminDep,
) -> dict:
    """Delete a user account."""
    await service.delete_user(user_id, admin_id=admin.id)
    return success_response(None, message="User deleted")


@router.get("/bot-knowledge", response_model=ApiResponse[BotKnowledgeResponse])
async def get_bot_knowledge(service: KnowledgeServiceDep, admin: AdminDep) -> dict:
    """Read the tutor's additional knowledge."""
    result = await service.get_knowledge()
    return success_response(result)


@router.put("/bot-knowledge", response_model=ApiResponse[BotKnowledgeResponse])
async def update_bot_knowledge(
    body: BotKnowledgeUpdateRequest,
    service: KnowledgeServiceDep,
    admin: AdminDep,
) -> dict:
    """Replace the tutor's additional knowledge."""
    result = await service.update_knowledge(body.knowledge, admin_id=admin.id)
    return success_response(result)
