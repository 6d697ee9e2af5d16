"""Course catalog schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Also the key format of the course prompt table.
COURSE_SLUG_PATTERN = r"^[a-z0-9][a-z0-9_-]{0,63}$"


class CourseResponse(BaseModel):
    """Public course representation."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    slug: str | None = None
    title: str
    description: str | None = None
    category: str | None = None
    image_url: str | None = None
    is_published: bool
    tutor_id: int | None = None
    created_at: datetime


class CourseCreateRequest(BaseModel):
    """Admin request to add a course."""

    slug: str | None = Field(default=None, pattern=COURSE_SLUG_PATTERN)
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    category: str | None = Field(default=None, max_length=50)
    image_url: str | None = Field(default=None, max_length=500)
    is_published: bool = True

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()


class CourseUpdateRequest(BaseModel):
    """Admin partial update of a course; omitted fields are left alone."""

    slug: str | None = Field(default=None, pattern=COURSE_SLUG_PATTERN)
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category: str | None = Field(default=None, max_length=50)
    image_url: str | None = Field(default=None, max_length=500)
    is_published: bool | None = None


class SeedResult(BaseModel):
    """Number of catalog courses inserted by a seed request."""

    model_config = ConfigDict(frozen=True)

    inserted: int
