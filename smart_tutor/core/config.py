"""Application configuration using Pydantic Settings V2."""

from functools import cached_property
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from smart_tutor.core.settings import (
    AppConfig,
    AuthConfig,
    DatabaseConfig,
    GatewayConfig,
    RedisConfig,
    ServerConfig,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.gateway.chat_model).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # AI Gateway
    ai_gateway_url: str = Field(
        default="https://ai.gateway.lovable.dev/v1",
        description="Base URL of the OpenAI-compatible completion gateway",
    )
    ai_gateway_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Gateway API key (empty means the AI service is unconfigured)",
    )
    chat_model: str = Field(
        default="google/gemini-3-flash-preview",
        description="Model used for the tutor chat",
    )
    image_model: str = Field(
        default="google/gemini-2.5-flash-image-preview",
        description="Model used for image generation",
    )
    gateway_connect_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Connect timeout for gateway calls (stream reads are unbounded)",
    )
    course_prompts_path: Path | None = Field(
        default=None,
        description="JSON file mapping course ids to tutor instructions",
    )

    # App
    app_name: str = Field(
        default="dlh-smart-tutor",
        description="Application name",
    )
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=True,
        description="Debug mode",
    )
    cors_origins: str = Field(
        default="",
        description="Comma-separated CORS origins (ignored in development)",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=8004,
        ge=1,
        le=65535,
        description="Server port",
    )

    # JWT Auth
    jwt_secret_key: SecretStr = Field(
        description="JWT secret key for token signing",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )
    jwt_access_token_expire_minutes: int = Field(
        default=30,
        ge=1,
        le=1440,
        description="Access token expiration in minutes",
    )
    jwt_refresh_token_expire_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Refresh token expiration in days",
    )
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=16,
        description="bcrypt cost factor",
    )
    login_rate_limit: str = Field(
        default="5/minute",
        description="Login endpoint rate limit",
    )
    register_rate_limit: str = Field(
        default="3/minute",
        description="Register endpoint rate limit",
    )
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enforce per-client rate limits on the auth endpoints",
    )

    # Database
    database_url: SecretStr = Field(
        description="Async database URL (mysql+aiomysql://... or sqlite+aiosqlite://...)",
    )

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )

    # --- Domain properties ---

    @cached_property
    def gateway(self) -> GatewayConfig:
        """AI gateway configuration."""
        return GatewayConfig(
            base_url=self.ai_gateway_url,
            api_key=self.ai_gateway_api_key,
            chat_model=self.chat_model,
            image_model=self.image_model,
            connect_timeout_seconds=self.gateway_connect_timeout_seconds,
            course_prompts_path=self.course_prompts_path,
        )

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            env=self.app_env,
            debug=self.debug,
            cors_origins=tuple(
                origin.strip()
                for origin in self.cors_origins.split(",")
                if origin.strip()
            ),
        )

    @cached_property
    def server(self) -> ServerConfig:
        """Server configuration."""
        return ServerConfig(
            host=self.host,
            port=self.port,
        )

    @cached_property
    def auth(self) -> AuthConfig:
        """JWT authentication configuration."""
        return AuthConfig(
            secret_key=self.jwt_secret_key,
            algorithm=self.jwt_algorithm,
            access_token_expire_minutes=self.jwt_access_token_expire_minutes,
            refresh_token_expire_days=self.jwt_refresh_token_expire_days,
            bcrypt_rounds=self.bcrypt_rounds,
            login_rate_limit=self.login_rate_limit,
            register_rate_limit=self.register_rate_limit,
            rate_limit_enabled=self.rate_limit_enabled,
        )

    @cached_property
    def database(self) -> DatabaseConfig:
        """Database connection configuration."""
        return DatabaseConfig(url=self.database_url)

    @cached_property
    def redis(self) -> RedisConfig:
        """Redis connection configuration."""
        return RedisConfig(url=self.redis_url)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app.is_development


# Global settings instance
settings = Settings()
