"""Image generator schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GenerateImageRequest(BaseModel):
    """Text description of the image to generate."""

    prompt: str = Field(..., min_length=1, max_length=2000)

    @field_validator("prompt")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Prompt is required")
        return stripped


class GeneratedImageResponse(BaseModel):
    """Stored generated image."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    prompt: str
    image_url: str
    created_at: datetime


class DashboardStats(BaseModel):
    """Per-user activity counters for the dashboard."""

    model_config = ConfigDict(frozen=True)

    chat_sessions: int
    generated_images: int
