"""Integration tests for the authentication endpoints."""

import pytest
from httpx import AsyncClient

from smart_tutor.models.user import User
from smart_tutor.services.token_service import MAX_LOGIN_ATTEMPTS

REGISTER = {
    "email": "New.Learner@Test.com",
    "password": "Secure1234!",
    "full_name": "New Learner",
    "country": "Ghana",
}


class TestRegister:
    async def test_register_signs_in(self, async_client: AsyncClient) -> None:
        resp = await async_client.post("/api/auth/register", json=REGISTER)

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["user"]["email"] == "new.learner@test.com"
        assert data["user"]["role"] == "user"
        assert data["user"]["user_type"] == "student"
        assert data["user"]["country"] == "Ghana"
        assert data["tokens"]["token_type"] == "bearer"

    async def test_duplicate_email(self, async_client: AsyncClient) -> None:
        await async_client.post("/api/auth/register", json=REGISTER)
        resp = await async_client.post("/api/auth/register", json=REGISTER)
        assert resp.status_code == 409

    @pytest.mark.parametrize("password", ["short1!", "nouppercase1!", "NoDigits!!", "NoSpecial12"])
    async def test_weak_password(self, async_client: AsyncClient, password: str) -> None:
        resp = await async_client.post(
            "/api/auth/register", json={**REGISTER, "password": password}
        )
        assert resp.status_code == 422


class TestLogin:
    async def test_login(self, async_client: AsyncClient, student: User) -> None:
        resp = await async_client.post(
            "/api/auth/login",
            json={"email": "student@test.com", "password": "Test1234!"},
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["access_token"]

    async def test_wrong_password(self, async_client: AsyncClient, student: User) -> None:
        resp = await async_client.post(
            "/api/auth/login",
            json={"email": "student@test.com", "password": "Wrong1234!"},
        )
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "INVALID_CREDENTIALS"

    async def test_lockout(self, async_client: AsyncClient, student: User) -> None:
        bad = {"email": "student@test.com", "password": "Wrong1234!"}
        for _ in range(MAX_LOGIN_ATTEMPTS):
            await async_client.post("/api/auth/login", json=bad)

        resp = await async_client.post(
            "/api/auth/login",
            json={"email": "student@test.com", "password": "Test1234!"},
        )
        assert resp.status_code == 429
        assert resp.json()["error"]["code"] == "ACCOUNT_LOCKED"

    async def test_suspended(
        self, async_client: AsyncClient, admin_client: AsyncClient, student: User
    ) -> None:
        await admin_client.patch(
            f"/api/v1/admin/users/{student.id}", json={"is_suspended": True}
        )
        resp = await async_client.post(
            "/api/auth/login",
            json={"email": "student@test.com", "password": "Test1234!"},
        )
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "ACCOUNT_SUSPENDED"


class TestSessionLifecycle:
    async def _login(self, client: AsyncClient) -> dict:
        resp = await client.post(
            "/api/auth/login",
            json={"email": "student@test.com", "password": "Test1234!"},
        )
        return resp.json()["data"]

    async def test_logout_revokes_tokens(
        self, async_client: AsyncClient, student: User
    ) -> None:
        tokens = await self._login(async_client)
        headers = {"Authorization": f"Bearer {tokens['access_token']}"}

        resp = await async_client.post(
            "/api/auth/logout",
            json={"refresh_token": tokens["refresh_token"]},
            headers=headers,
        )
        assert resp.status_code == 200

        resp = await async_client.get("/api/v1/profile", headers=headers)
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "TOKEN_BLACKLISTED"

        resp = await async_client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert resp.status_code == 401

    async def test_refresh_rotates(self, async_client: AsyncClient, student: User) -> None:
        tokens = await self._login(async_client)

        resp = await async_client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["refresh_token"] != tokens["refresh_token"]

        resp = await async_client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert resp.status_code == 401
