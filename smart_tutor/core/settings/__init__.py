"""Domain-specific configuration models."""

from smart_tutor.core.settings.app_config import AppConfig
from smart_tutor.core.settings.auth_config import AuthConfig
from smart_tutor.core.settings.database_config import DatabaseConfig
from smart_tutor.core.settings.gateway_config import GatewayConfig
from smart_tutor.core.settings.redis_config import RedisConfig
from smart_tutor.core.settings.server_config import ServerConfig

__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "GatewayConfig",
    "RedisConfig",
    "ServerConfig",
]
