"""Tests for TokenService."""

import time

import jwt as pyjwt
import pytest

from smart_tutor.core.config import settings
from smart_tutor.core.exceptions import InvalidTokenError, TokenExpiredError
from smart_tutor.services.token_service import TokenService


class TestCreateTokens:
    """Tests for token creation."""

    def test_access_token_round_trip(self, token_service: TokenService) -> None:
        token = token_service.create_access_token(
            user_id=42, email="test@test.com", role="user"
        )
        payload = token_service.decode_token(token)
        assert payload.sub == "42"
        assert payload.email == "test@test.com"
        assert payload.role == "user"
        assert payload.type == "access"
        assert payload.jti

    def test_refresh_token_type(self, token_service: TokenService) -> None:
        token = token_service.create_refresh_token(user_id=10, email="r@r.com", role="admin")
        payload = token_service.decode_token(token)
        assert payload.type == "refresh"
        assert payload.role == "admin"

    def test_each_token_has_unique_jti(self, token_service: TokenService) -> None:
        first = token_service.decode_token(token_service.create_access_token(1, "a@b.com", "user"))
        second = token_service.decode_token(token_service.create_access_token(1, "a@b.com", "user"))
        assert first.jti != second.jti


class TestDecodeToken:
    """Tests for token decoding."""

    def test_invalid_token_raises(self, token_service: TokenService) -> None:
        with pytest.raises(InvalidTokenError):
            token_service.decode_token("not.a.valid.token")

    def test_expired_token_raises(self, token_service: TokenService) -> None:
        payload = {
            "sub": "1",
            "email": "a@b.com",
            "role": "user",
            "type": "access",
            "jti": "test-jti",
            "exp": int(time.time()) - 10,
        }
        expired_token = pyjwt.encode(
            payload,
            settings.auth.secret_key.get_secret_value(),
            algorithm=settings.auth.algorithm,
        )
        with pytest.raises(TokenExpiredError):
            token_service.decode_token(expired_token)


class TestBlacklist:
    """Tests for token revocation."""

    async def test_blacklist_and_check(self, token_service: TokenService) -> None:
        await token_service.blacklist_token("jti-123", int(time.time()) + 3600)
        assert await token_service.is_blacklisted("jti-123") is True

    async def test_not_blacklisted(self, token_service: TokenService) -> None:
        assert await token_service.is_blacklisted("unknown-jti") is False

    async def test_already_expired_token_not_stored(
        self, token_service: TokenService
    ) -> None:
        await token_service.blacklist_token("old-jti", int(time.time()) - 1)
        assert await token_service.is_blacklisted("old-jti") is False


class TestLoginAttempts:
    """Tests for failed login tracking."""

    async def test_record_and_reset(self, token_service: TokenService) -> None:
        assert await token_service.record_failed_login("fail@test.com") == 1
        assert await token_service.record_failed_login("fail@test.com") == 2
        await token_service.reset_login_attempts("fail@test.com")
        assert await token_service.get_login_attempts("fail@test.com") == 0


class TestRefreshLock:
    """Tests for the refresh lock."""

    async def test_lock_is_exclusive(self, token_service: TokenService) -> None:
        assert await token_service.acquire_refresh_lock("jti-1") is True
        assert await token_service.acquire_refresh_lock("jti-1") is False
        await token_service.release_refresh_lock("jti-1")
        assert await token_service.acquire_refresh_lock("jti-1") is True
