"""JWT authentication configuration."""

from pydantic import BaseModel, SecretStr


class AuthConfig(BaseModel, frozen=True):
    """JWT authentication settings."""

    secret_key: SecretStr
    algorithm: str
    access_token_expire_minutes: int
    refresh_token_expire_days: int
    bcrypt_rounds: int
    login_rate_limit: str
    register_rate_limit: str
    rate_limit_enabled: bool = True

    @property
    def access_token_ttl_seconds(self) -> int:
        """Access token lifetime in seconds."""
        return self.access_token_expire_minutes * 60
