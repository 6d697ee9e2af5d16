"""Authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from smart_tutor.core.config import settings
from smart_tutor.core.rate_limit import limiter
from smart_tutor.dependencies import (
    CurrentUser,
    get_auth_service,
    get_current_user,
)
from smart_tutor.schemas.auth_schema import (
    LoginRequest,
    LogoutRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    TokenPayload,
    TokenResponse,
)
from smart_tutor.schemas.response_schema import ApiResponse, success_response
from smart_tutor.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.post(
    "/register",
    response_model=ApiResponse[RegisterResponse],
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.auth.register_rate_limit)
async def register(
    request: Request,
    body: RegisterRequest,
    auth_service: AuthServiceDep,
) -> dict:
    """Create a learner account and sign it in."""
    result = await auth_service.register(body)
    return success_response(result, status=201)


@router.post("/login", response_model=ApiResponse[TokenResponse])
@limiter.limit(settings.auth.login_rate_limit)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthServiceDep,
) -> dict:
    """Authenticate and receive tokens."""
    result = await auth_service.login(body)
    return success_response(result)


@router.post("/logout", response_model=ApiResponse[MessageResponse])
async def logout(
    request: Request,
    body: LogoutRequest,
    auth_service: AuthServiceDep,
    current_user: CurrentUser = Depends(get_current_user),
) -> dict:
    """Revoke the current access token (and the refresh token, if given)."""
    access_payload = TokenPayload(
        sub=str(current_user.id),
        email=current_user.email,
        role=current_user.role,
        type="access",
        jti=request.state.jti,
        exp=request.state.exp,
    )
    result = await auth_service.logout(access_payload, body)
    return success_response(result)


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
async def refresh(
    body: RefreshRequest,
    auth_service: AuthServiceDep,
) -> dict:
    """Exchange a refresh token for a new token pair."""
    result = await auth_service.refresh(body)
    return success_response(result)
