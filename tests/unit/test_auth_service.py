"""Tests for AuthService."""

import time

import fakeredis.aioredis
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from smart_tutor.core.exceptions import (
    AccountLockedError,
    AccountSuspendedError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenBlacklistedError,
    UserAlreadyExistsError,
)
from smart_tutor.repositories.user_repo import UserRepository
from smart_tutor.schemas.auth_schema import (
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPayload,
)
from smart_tutor.services.auth_service import AuthService
from smart_tutor.services.token_service import TokenService
from tests.support import create_user


@pytest.fixture
def auth_service(
    db_session: AsyncSession,
    fake_redis: fakeredis.aioredis.FakeRedis,
) -> AuthService:
    return AuthService(
        user_repo=UserRepository(db_session),
        token_service=TokenService(fake_redis),
        session=db_session,
    )


def _register_request(email: str = "reg@test.com") -> RegisterRequest:
    return RegisterRequest(
        email=email,
        password="Test1234!",
        full_name="Ada Learner",
        user_type="student",
        country="Nigeria",
        course_of_interest="Web Development",
    )


class TestRegister:
    """Tests for sign-up."""

    async def test_register_stores_profile(self, auth_service: AuthService) -> None:
        result = await auth_service.register(_register_request())
        assert result.user.email == "reg@test.com"
        assert result.user.full_name == "Ada Learner"
        assert result.user.country == "Nigeria"
        assert result.user.course_of_interest == "Web Development"
        assert result.user.role == "user"
        assert result.tokens.access_token
        assert result.tokens.refresh_token

    async def test_register_duplicate_email(self, auth_service: AuthService) -> None:
        await auth_service.register(_register_request("dup@test.com"))
        with pytest.raises(UserAlreadyExistsError):
            await auth_service.register(_register_request("dup@test.com"))


class TestLogin:
    """Tests for sign-in."""

    async def test_login_success(self, auth_service: AuthService) -> None:
        await create_user(email="login@test.com")
        result = await auth_service.login(
            LoginRequest(email="login@test.com", password="Test1234!")
        )
        assert result.access_token
        assert result.token_type == "bearer"

    async def test_login_wrong_password(self, auth_service: AuthService) -> None:
        await create_user(email="login@test.com")
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(
                LoginRequest(email="login@test.com", password="WrongPass1!")
            )

    async def test_login_unknown_email(self, auth_service: AuthService) -> None:
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(
                LoginRequest(email="nope@test.com", password="Test1234!")
            )

    async def test_login_suspended_user(self, auth_service: AuthService) -> None:
        await create_user(email="banned@test.com", is_suspended=True)
        with pytest.raises(AccountSuspendedError):
            await auth_service.login(
                LoginRequest(email="banned@test.com", password="Test1234!")
            )

    async def test_login_account_locked(
        self,
        auth_service: AuthService,
        token_service: TokenService,
    ) -> None:
        await create_user(email="login@test.com")
        for _ in range(5):
            await token_service.record_failed_login("login@test.com")
        with pytest.raises(AccountLockedError):
            await auth_service.login(
                LoginRequest(email="login@test.com", password="Test1234!")
            )


class TestLogout:
    """Tests for sign-out."""

    async def test_logout_revokes_both_tokens(
        self, auth_service: AuthService, token_service: TokenService
    ) -> None:
        refresh = token_service.create_refresh_token(1, "a@b.com", "user")
        refresh_payload = token_service.decode_token(refresh)
        access_payload = TokenPayload(
            sub="1",
            email="a@b.com",
            role="user",
            type="access",
            jti="access-jti",
            exp=int(time.time()) + 600,
        )
        await auth_service.logout(access_payload, LogoutRequest(refresh_token=refresh))
        assert await token_service.is_blacklisted("access-jti") is True
        assert await token_service.is_blacklisted(refresh_payload.jti) is True

    async def test_logout_ignores_bad_refresh_token(
        self, auth_service: AuthService, token_service: TokenService
    ) -> None:
        access_payload = TokenPayload(
            sub="1",
            email="a@b.com",
            role="user",
            type="access",
            jti="access-jti",
            exp=int(time.time()) + 600,
        )
        result = await auth_service.logout(
            access_payload, LogoutRequest(refresh_token="garbage")
        )
        assert result.message == "Successfully logged out"


class TestRefresh:
    """Tests for token refresh."""

    async def test_refresh_rotates_token(
        self, auth_service: AuthService, token_service: TokenService
    ) -> None:
        user = await create_user(email="r@test.com")
        refresh = token_service.create_refresh_token(user.id, user.email, user.role)
        result = await auth_service.refresh(RefreshRequest(refresh_token=refresh))
        assert result.access_token
        with pytest.raises(TokenBlacklistedError):
            await auth_service.refresh(RefreshRequest(refresh_token=refresh))

    async def test_refresh_rejects_access_token(
        self, auth_service: AuthService, token_service: TokenService
    ) -> None:
        access = token_service.create_access_token(1, "a@b.com", "user")
        with pytest.raises(InvalidTokenError):
            await auth_service.refresh(RefreshRequest(refresh_token=access))

    async def test_refresh_rejects_suspended_user(
        self, auth_service: AuthService, token_service: TokenService
    ) -> None:
        user = await create_user(email="s@test.com", is_suspended=True)
        refresh = token_service.create_refresh_token(user.id, user.email, user.role)
        with pytest.raises(AccountSuspendedError):
            await auth_service.refresh(RefreshRequest(refresh_token=refresh))
