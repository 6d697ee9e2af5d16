"""Global dependencies for the application."""

from collections.abc import Callable
from functools import lru_cache

from fastapi import Depends, Request
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from smart_tutor.core.config import settings
from smart_tutor.core.database import async_session_factory, get_async_session
from smart_tutor.core.exceptions import AuthenticationError, AuthorizationError
from smart_tutor.core.redis import get_redis
from smart_tutor.repositories.chat_repo import ChatRepository
from smart_tutor.repositories.course_repo import CourseRepository
from smart_tutor.repositories.image_repo import ImageRepository
from smart_tutor.repositories.settings_repo import ScopedSettingsReader, SettingsRepository
from smart_tutor.repositories.user_repo import UserRepository
from smart_tutor.services.auth_service import AuthService
from smart_tutor.services.chat_relay import ChatRelayService
from smart_tutor.services.chat_session_service import ChatSessionService
from smart_tutor.services.course_prompts import CoursePromptTable
from smart_tutor.services.course_service import CourseService
from smart_tutor.services.gateway_client import GatewayClient
from smart_tutor.services.image_service import ImageService
from smart_tutor.services.knowledge_service import KnowledgeService
from smart_tutor.services.prompt_assembler import PromptAssembler
from smart_tutor.services.token_service import TokenService
from smart_tutor.services.user_service import UserService

# --- AI gateway ---


@lru_cache
def get_gateway_client() -> GatewayClient:
    """Get the process-wide gateway client (one pooled HTTP client)."""
    return GatewayClient(settings.gateway)


@lru_cache
def get_course_prompt_table() -> CoursePromptTable:
    """Load the course instruction table once per process."""
    return CoursePromptTable.load(settings.gateway.course_prompts_path)


# --- Auth dependencies ---


class CurrentUser(BaseModel):
    """Authenticated user extracted from request state."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    role: str


def get_token_service() -> TokenService:
    """Get TokenService backed by the active Redis client."""
    return TokenService(get_redis())


def get_current_user(request: Request) -> CurrentUser:
    """Extract the authenticated user from middleware-populated state."""
    state = getattr(request, "state", None)
    user_id = getattr(state, "user_id", None) if state else None
    if user_id is None:
        raise AuthenticationError(message="Not authenticated")
    return CurrentUser(
        id=state.user_id,
        email=state.email,
        role=state.role,
    )


def require_role(*allowed_roles: str) -> Callable[..., CurrentUser]:
    """Dependency factory that enforces role-based access control."""

    def _check(
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        if current_user.role not in allowed_roles:
            raise AuthorizationError(
                message=f"Role '{current_user.role}' is not permitted"
            )
        return current_user

    return _check


# --- Repositories ---


def get_user_repository(
    session: AsyncSession = Depends(get_async_session),
) -> UserRepository:
    return UserRepository(session)


def get_chat_repository(
    session: AsyncSession = Depends(get_async_session),
) -> ChatRepository:
    return ChatRepository(session)


def get_course_repository(
    session: AsyncSession = Depends(get_async_session),
) -> CourseRepository:
    return CourseRepository(session)


def get_settings_repository(
    session: AsyncSession = Depends(get_async_session),
) -> SettingsRepository:
    return SettingsRepository(session)


def get_image_repository(
    session: AsyncSession = Depends(get_async_session),
) -> ImageRepository:
    return ImageRepository(session)


# --- Services ---


def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
    session: AsyncSession = Depends(get_async_session),
) -> AuthService:
    """Get AuthService with all dependencies."""
    return AuthService(
        user_repo=user_repo,
        token_service=token_service,
        session=session,
    )


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_factory


def get_prompt_assembler(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    table: CoursePromptTable = Depends(get_course_prompt_table),
) -> PromptAssembler:
    """Prompt assembler whose knowledge read opens and closes its own session.

    The relay response outlives the request handler by the whole stream, so
    it must not hold the request-scoped session (and its pooled connection).
    """
    return PromptAssembler.for_tutor(ScopedSettingsReader(session_factory), table)


def get_chat_relay_service(
    gateway: GatewayClient = Depends(get_gateway_client),
    assembler: PromptAssembler = Depends(get_prompt_assembler),
) -> ChatRelayService:
    return ChatRelayService(gateway=gateway, assembler=assembler)


def get_chat_session_service(
    chat_repo: ChatRepository = Depends(get_chat_repository),
    current_user: CurrentUser = Depends(get_current_user),
) -> ChatSessionService:
    """Get ChatSessionService for the authenticated user."""
    return ChatSessionService(chat_repo=chat_repo, user_id=current_user.id)


def get_knowledge_service(
    settings_repo: SettingsRepository = Depends(get_settings_repository),
) -> KnowledgeService:
    return KnowledgeService(settings_repo)


def get_course_service(
    course_repo: CourseRepository = Depends(get_course_repository),
) -> CourseService:
    return CourseService(course_repo)


def get_image_service(
    gateway: GatewayClient = Depends(get_gateway_client),
    image_repo: ImageRepository = Depends(get_image_repository),
    current_user: CurrentUser = Depends(get_current_user),
) -> ImageService:
    """Get ImageService for the authenticated user."""
    return ImageService(
        gateway=gateway,
        image_repo=image_repo,
        user_id=current_user.id,
    )


def get_user_service(
    user_repo: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(user_repo)
