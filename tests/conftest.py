"""Pytest configuration and fixtures."""

# Imported first: it sets the test environment the settings are built from.
from tests.support import (  # isort: skip
    create_user,
    make_auth_headers,
    override_get_async_session,
    test_engine,
    test_session_factory,
)

from collections.abc import AsyncGenerator  # noqa: E402

import fakeredis.aioredis
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from smart_tutor.core.database import Base
from smart_tutor.models.admin_setting import AdminSetting  # noqa: F401
from smart_tutor.models.chat_message import ChatMessage  # noqa: F401
from smart_tutor.models.chat_session import ChatSession  # noqa: F401
from smart_tutor.models.course import Course  # noqa: F401
from smart_tutor.models.generated_image import GeneratedImage  # noqa: F401
from smart_tutor.models.user import User
from smart_tutor.services.token_service import TokenService


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    """Create all tables before each test, drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a raw async session for repository tests."""
    async with test_session_factory() as session:
        yield session


# --- Test Redis (fakeredis) ---


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Create a fresh fake Redis client."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture(autouse=True)
def patch_redis(
    fake_redis: fakeredis.aioredis.FakeRedis, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Patch the global redis client used by the middleware and get_redis()."""
    monkeypatch.setattr("smart_tutor.core.redis.redis_client", fake_redis)


@pytest.fixture
def token_service(fake_redis: fakeredis.aioredis.FakeRedis) -> TokenService:
    """Create a TokenService backed by fake Redis."""
    return TokenService(fake_redis)


# --- Users ---


@pytest.fixture
async def student() -> User:
    return await create_user()


@pytest.fixture
async def admin() -> User:
    return await create_user(
        email="admin@test.com", full_name="Test Admin", role="admin"
    )


# --- App override & client fixtures ---


def _get_app():  # type: ignore[no-untyped-def]
    """Import app lazily and apply overrides."""
    from smart_tutor.core.database import get_async_session as original_dep
    from smart_tutor.dependencies import get_session_factory
    from smart_tutor.main import app

    app.dependency_overrides[original_dep] = override_get_async_session
    app.dependency_overrides[get_session_factory] = lambda: test_session_factory
    return app


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client."""
    application = _get_app()
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    application.dependency_overrides.clear()


@pytest.fixture
async def authed_client(
    fake_redis: fakeredis.aioredis.FakeRedis,
    student: User,
) -> AsyncGenerator[AsyncClient, None]:
    """Client signed in as ``student``."""
    application = _get_app()
    headers = make_auth_headers(fake_redis, user_id=student.id, email=student.email)
    transport = ASGITransport(app=application)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=headers
    ) as ac:
        yield ac
    application.dependency_overrides.clear()


@pytest.fixture
async def admin_client(
    fake_redis: fakeredis.aioredis.FakeRedis,
    admin: User,
) -> AsyncGenerator[AsyncClient, None]:
    """Client signed in as ``admin``."""
    application = _get_app()
    headers = make_auth_headers(
        fake_redis, user_id=admin.id, email=admin.email, role="admin"
    )
    transport = ASGITransport(app=application)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=headers
    ) as ac:
        yield ac
    application.dependency_overrides.clear()
