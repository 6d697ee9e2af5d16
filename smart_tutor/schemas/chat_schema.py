"""Chat relay request schemas and stream event types."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from smart_tutor.core.exceptions import ChatRequestError


class ChatMessage(BaseModel):
    """One conversation turn as sent by the chat client."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class ChatRelayRequest(BaseModel):
    """Body of ``POST /api/v1/chat``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    messages: list[ChatMessage]
    course_id: str | None = Field(default=None, alias="courseId")

    @classmethod
    def from_payload(cls, payload: Any) -> "ChatRelayRequest":
        """Validate a decoded JSON body, raising ``ChatRequestError`` (400).

        A missing or non-array ``messages`` field is reported with the fixed
        "Messages array is required" message the chat client expects.
        """
        if not isinstance(payload, dict) or not isinstance(
            payload.get("messages"), list
        ):
            raise ChatRequestError()
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise ChatRequestError(message="Invalid message format") from exc

    def upstream_messages(self, system_prompt: str) -> list[dict[str, str]]:
        """System prompt followed by every turn, in order."""
        return [
            {"role": "system", "content": system_prompt},
            *(message.model_dump() for message in self.messages),
        ]


class StreamEvent(BaseModel):
    """Text delta decoded from one ``data:`` line of the relayed stream."""

    model_config = ConfigDict(frozen=True)

    delta_text: str
