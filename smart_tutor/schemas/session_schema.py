"""Chat history API schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatSessionResponse(BaseModel):
    """Chat session as listed in the history sidebar."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    title: str
    course_id: str | None = None
    created_at: datetime


class CreateSessionRequest(BaseModel):
    """Request to open a new chat session."""

    course_id: str | None = Field(default=None, max_length=64)


class MessageResponse(BaseModel):
    """Single persisted message."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    session_id: int
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime


class AppendMessageRequest(BaseModel):
    """Request to persist one message of an exchange."""

    role: Literal["user", "assistant"]
    content: str = Field(..., min_length=1, max_length=100_000)


class SessionMessagesResponse(BaseModel):
    """All messages of a session in chronological order."""

    model_config = ConfigDict(frozen=True)

    session_id: int
    title: str
    messages: list[MessageResponse]
