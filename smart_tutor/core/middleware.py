"""ASGI authentication middleware."""

import json
from typing import Any

import jwt
import structlog
from starlette.types import ASGIApp, Receive, Scope, Send

from smart_tutor.core.config import settings
from smart_tutor.core import redis as redis_state

logger = structlog.get_logger()

PUBLIC_PATHS: set[str] = {
    "/",
    "/health",
    "/openapi.json",
    "/api/auth/register",
    "/api/auth/login",
    "/api/auth/refresh",
}

# The course catalog is browsable before signing up.
PUBLIC_READ_PREFIXES: tuple[str, ...] = ("/api/v1/courses",)


def _is_public(method: str, path: str) -> bool:
    normalized = path.rstrip("/") or "/"
    if normalized in PUBLIC_PATHS or path.startswith(("/docs", "/redoc")):
        return True
    return method == "GET" and normalized.startswith(PUBLIC_READ_PREFIXES)


class AuthMiddleware:
    """Pure ASGI middleware for JWT validation.

    Written against raw ASGI instead of ``BaseHTTPMiddleware`` so that
    streamed chat responses are passed through without being buffered.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "")
        if method == "OPTIONS" or _is_public(method, scope["path"]):
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        auth_header = headers.get(b"authorization", b"").decode()

        if not auth_header.startswith("Bearer "):
            await self._send_error(
                send, 401, "MISSING_TOKEN", "Authorization header required"
            )
            return

        token = auth_header[7:]
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                settings.auth.secret_key.get_secret_value(),
                algorithms=[settings.auth.algorithm],
            )
        except jwt.ExpiredSignatureError:
            await self._send_error(send, 401, "TOKEN_EXPIRED", "Token has expired")
            return
        except jwt.InvalidTokenError:
            await self._send_error(send, 401, "INVALID_TOKEN", "Invalid token")
            return

        if payload.get("type") != "access":
            await self._send_error(send, 401, "INVALID_TOKEN", "Invalid token type")
            return

        jti = payload.get("jti", "")
        client = redis_state.redis_client
        if client is not None:
            revoked = await client.get(f"{settings.redis.blacklist_prefix}{jti}")
            if revoked is not None:
                logger.info("Rejected revoked token", path=scope["path"])
                await self._send_error(
                    send, 401, "TOKEN_BLACKLISTED", "Token has been revoked"
                )
                return

        scope.setdefault("state", {})
        scope["state"]["user_id"] = int(payload["sub"])
        scope["state"]["email"] = payload["email"]
        scope["state"]["role"] = payload["role"]
        scope["state"]["jti"] = jti
        scope["state"]["exp"] = payload["exp"]

        await self.app(scope, receive, send)

    @staticmethod
    async def _send_error(send: Send, status: int, code: str, message: str) -> None:
        """Send a JSON error response directly."""
        body = json.dumps(
            {"success": False, "error": {"code": code, "message": message}}
        ).encode()

        await send(
            {
                "type": "http.response.start",
                "status": status,
                "headers": [
                    [b"content-type", b"application/json"],
                    [b"content-length", str(len(body)).encode()],
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})
