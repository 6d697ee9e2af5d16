"""Redis connection configuration."""

from pydantic import BaseModel


class RedisConfig(BaseModel, frozen=True):
    """Redis connection settings (token blacklist and login lockout)."""

    url: str
    blacklist_prefix: str = "token_blacklist:"
