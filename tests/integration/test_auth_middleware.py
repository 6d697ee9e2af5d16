"""Integration tests for the bearer token middleware."""

import fakeredis.aioredis
from httpx import AsyncClient

from smart_tutor.core.config import settings
from smart_tutor.models.user import User
from smart_tutor.services.token_service import TokenService


class TestAuthMiddleware:
    async def test_public_paths(self, async_client: AsyncClient) -> None:
        assert (await async_client.get("/health")).status_code == 200
        assert (await async_client.get("/api/v1/courses")).status_code == 200

    async def test_missing_token(self, async_client: AsyncClient) -> None:
        resp = await async_client.get("/api/v1/chat-sessions")
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "MISSING_TOKEN"

    async def test_invalid_token(self, async_client: AsyncClient) -> None:
        resp = await async_client.get(
            "/api/v1/chat-sessions", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "INVALID_TOKEN"

    async def test_refresh_token_rejected(
        self, async_client: AsyncClient, token_service: TokenService, student: User
    ) -> None:
        token = token_service.create_refresh_token(
            user_id=student.id, email=student.email, role="user"
        )
        resp = await async_client.get(
            "/api/v1/chat-sessions", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 401

    async def test_blacklisted_token(
        self,
        async_client: AsyncClient,
        token_service: TokenService,
        fake_redis: fakeredis.aioredis.FakeRedis,
        student: User,
    ) -> None:
        token = token_service.create_access_token(
            user_id=student.id, email=student.email, role="user"
        )
        jti = token_service.decode_token(token).jti
        await fake_redis.set(f"{settings.redis.blacklist_prefix}{jti}", "1")

        resp = await async_client.get(
            "/api/v1/chat-sessions", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "TOKEN_BLACKLISTED"
