"""Shared test helpers: environment, in-memory database and fakes.

Imported by ``conftest`` before anything from ``smart_tutor`` so that the
settings object is built from the test environment.
"""

import json
import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("AI_GATEWAY_API_KEY", "test-gateway-key")

from collections.abc import AsyncGenerator, Callable  # noqa: E402

import fakeredis.aioredis  # noqa: E402
import httpx  # noqa: E402
from pydantic import SecretStr  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from smart_tutor.core.security import hash_password  # noqa: E402
from smart_tutor.core.settings import GatewayConfig  # noqa: E402
from smart_tutor.models.user import User  # noqa: E402
from smart_tutor.services.gateway_client import GatewayClient  # noqa: E402
from smart_tutor.services.token_service import TokenService  # noqa: E402

# --- Test DB (SQLite in-memory) ---

test_engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session."""
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def create_user(
    email: str = "student@test.com",
    password: str = "Test1234!",
    full_name: str = "Test Student",
    role: str = "user",
    **profile: object,
) -> User:
    """Insert a user directly and return it."""
    async with test_session_factory() as session:
        user = User(
            email=email,
            hashed_password=await hash_password(password),
            full_name=full_name,
            role=role,
            **profile,
        )
        session.add(user)
        await session.commit()
        return user


# --- Tokens ---


def make_auth_headers(
    fake_redis: fakeredis.aioredis.FakeRedis,
    user_id: int = 1,
    email: str = "student@test.com",
    role: str = "user",
) -> dict[str, str]:
    """Generate Authorization headers with a valid access token."""
    ts = TokenService(fake_redis)
    token = ts.create_access_token(user_id=user_id, email=email, role=role)
    return {"Authorization": f"Bearer {token}"}


# --- Fake AI gateway ---

GatewayHandler = Callable[[httpx.Request], httpx.Response]


def make_gateway_config(api_key: str = "test-gateway-key") -> GatewayConfig:
    return GatewayConfig(
        base_url="https://gateway.test/v1",
        api_key=SecretStr(api_key),
        chat_model="test/chat-model",
        image_model="test/image-model",
        connect_timeout_seconds=5.0,
    )


def make_gateway(
    handler: GatewayHandler, api_key: str = "test-gateway-key"
) -> GatewayClient:
    """GatewayClient whose HTTP calls are answered by ``handler``."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GatewayClient(make_gateway_config(api_key), http_client=http)


def sse_body(*deltas: str, done: bool = True) -> bytes:
    """Build a gateway event stream carrying ``deltas``."""
    lines = [
        "data: " + json.dumps({"choices": [{"delta": {"content": d}}]}) + "\n\n"
        for d in deltas
    ]
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode()
