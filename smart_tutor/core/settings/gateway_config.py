"""AI completion gateway configuration."""

from pathlib import Path

from pydantic import BaseModel, SecretStr


class GatewayConfig(BaseModel, frozen=True):
    """OpenAI-compatible completion gateway settings."""

    base_url: str
    api_key: SecretStr
    chat_model: str
    image_model: str
    connect_timeout_seconds: float
    course_prompts_path: Path | None = None

    @property
    def is_configured(self) -> bool:
        """Check whether a gateway credential is present."""
        return bool(self.api_key.get_secret_value())

    @property
    def completions_url(self) -> str:
        """Full URL of the chat-completions endpoint."""
        return f"{self.base_url.rstrip('/')}/chat/completions"
