"""Profile and admin back-office schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

UserType = Literal["student", "tutor", "parent"]


class ProfileUpdateRequest(BaseModel):
    """Self-service profile update; omitted fields are left alone."""

    full_name: str | None = Field(default=None, min_length=2, max_length=100)
    phone_number: str | None = Field(default=None, max_length=40)
    country: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=2000)
    course_of_interest: str | None = Field(default=None, max_length=100)


class AdminUserUpdateRequest(ProfileUpdateRequest):
    """Admin update of another user's profile and account flags."""

    user_type: UserType | None = None
    is_suspended: bool | None = None
    is_verified: bool | None = None


class RoleUpdateRequest(BaseModel):
    """Replace a user's role."""

    role: Literal["user", "admin"]


class BotKnowledgeResponse(BaseModel):
    """Admin-supplied free text appended to the tutor's system prompt."""

    model_config = ConfigDict(frozen=True)

    knowledge: str


class BotKnowledgeUpdateRequest(BaseModel):
    """Replace the tutor's additional knowledge."""

    knowledge: str = Field(..., max_length=50_000)
