"""Profile self-service and admin user management."""

import structlog

from smart_tutor.core.exceptions import AuthorizationError, UserNotFoundError
from smart_tutor.models.user import User
from smart_tutor.repositories.user_repo import UserRepository
from smart_tutor.schemas.admin_schema import (
    AdminUserUpdateRequest,
    ProfileUpdateRequest,
)
from smart_tutor.schemas.auth_schema import UserResponse

logger = structlog.get_logger()


class UserService:
    """Reads and edits user profiles."""

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    async def get_profile(self, user_id: int) -> UserResponse:
        return UserResponse.model_validate(await self._get_user(user_id))

    async def update_profile(self, user_id: int, request: ProfileUpdateRequest) -> UserResponse:
        await self._get_user(user_id)
        await self._user_repo.update_fields(user_id, **request.model_dump(exclude_unset=True))
        return await self._refreshed(user_id)

    # --- Admin ---

    async def list_users(self, query: str | None = None) -> list[UserResponse]:
        users = await self._user_repo.search(query.strip() if query else None)
        return [UserResponse.model_validate(u) for u in users]

    async def admin_update(self, user_id: int, request: AdminUserUpdateRequest) -> UserResponse:
        await self._get_user(user_id)
        changes = request.model_dump(exclude_unset=True)
        await self._user_repo.update_fields(user_id, **changes)
        logger.info("User updated by admin", user_id=user_id, fields=sorted(changes))
        return await self._refreshed(user_id)

    async def change_role(self, user_id: int, role: str, admin_id: int) -> UserResponse:
        if user_id == admin_id and role != "admin":
            raise AuthorizationError(message="Admins cannot remove their own admin role")
        await self._get_user(user_id)
        await self._user_repo.update_fields(user_id, role=role)
        logger.info("User role changed", user_id=user_id, role=role, admin_id=admin_id)
        return await self._refreshed(user_id)

    async def delete_user(self, user_id: int, admin_id: int) -> None:
        if user_id == admin_id:
            raise AuthorizationError(message="Admins cannot delete themselves")
        await self._get_user(user_id)
        await self._user_repo.delete(user_id)
        logger.info("User deleted", user_id=user_id, admin_id=admin_id)

    async def _get_user(self, user_id: int) -> User:
        user = await self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError
        return user

    async def _refreshed(self, user_id: int) -> UserResponse:
        user = await self._get_user(user_id)
        await self._user_repo.refresh(user)
        return UserResponse.model_validate(user)
