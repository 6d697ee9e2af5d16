"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from smart_tutor.api.common.auth_router import router as auth_router
from smart_tutor.api.v1.admin_router import router as admin_router
from smart_tutor.api.v1.chat_router import router as chat_router
from smart_tutor.api.v1.course_router import router as course_router
from smart_tutor.api.v1.image_router import router as image_router
from smart_tutor.api.v1.profile_router import router as profile_router
from smart_tutor.api.v1.session_router import router as session_router
from smart_tutor.core.config import settings
from smart_tutor.core.database import Base, engine
from smart_tutor.core.exceptions import (
    AppException,
    ChatRelayError,
    app_exception_handler,
    chat_relay_exception_handler,
    validation_exception_handler,
)
from smart_tutor.core.middleware import AuthMiddleware
from smart_tutor.core.rate_limit import limiter, rate_limit_exceeded_handler
from smart_tutor.core.redis import close_redis, init_redis
from smart_tutor.dependencies import get_gateway_client
from smart_tutor.models import (  # noqa: F401
    admin_setting,
    chat_message,
    chat_session,
    course,
    generated_image,
    user,
)
from smart_tutor.schemas.response_schema import ApiResponse, success_response

logger = structlog.get_logger()

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.app.env,
        chat_model=settings.gateway.chat_model,
        gateway_configured=settings.gateway.is_configured,
    )
    await init_redis()
    if settings.app.is_development:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield
    await get_gateway_client().aclose()
    await close_redis()
    await engine.dispose()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app.name,
    description="DLH Smart Tutor - streaming AI tutor chat for the Digital Learning Hub",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=settings.app.debug,
)

app.state.limiter = limiter

# Exception handlers (the most specific class wins)
app.add_exception_handler(ChatRelayError, chat_relay_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]

# Middleware (registration order: inner→outer, execution order: outer→inner)
app.add_middleware(AuthMiddleware)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.app.allowed_origins,
    allow_credentials=not settings.app.is_development,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=ApiResponse[dict])
async def health_check() -> dict:
    """Health check endpoint."""
    return success_response({"status": "healthy"})


@app.get("/", response_model=ApiResponse[dict])
async def root() -> dict:
    """Root endpoint."""
    return success_response(
        {
            "app": settings.app.name,
            "version": APP_VERSION,
            "docs": "/docs",
        }
    )


# Register routers
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(chat_router)
app.include_router(session_router)
app.include_router(course_router)
app.include_router(image_router)
app.include_router(admin_router)


def run() -> None:
    """Serve the app with uvicorn using the configured bind address."""
    import uvicorn

    logger.info("Serving", address=settings.server.bind_address)
    uvicorn.run(
        "smart_tutor.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.is_development,
    )
