"""In-memory view of one conversation as shown to the learner."""

from dataclasses import dataclass, field

from smart_tutor.schemas.chat_schema import ChatMessage


class ExchangeInProgressError(RuntimeError):
    """A second exchange was started while one is still streaming."""


@dataclass
class Transcript:
    """Ordered messages of the conversation currently on screen.

    While an exchange is streaming, the last message is the assistant
    placeholder; it starts empty and is replaced with the full accumulated
    text on every update.
    """

    session_id: int | None = None
    title: str | None = None
    messages: list[ChatMessage] = field(default_factory=list)
    in_flight: bool = False
    _placeholder_index: int | None = field(default=None, repr=False)

    def history(self) -> list[ChatMessage]:
        """Messages to send upstream; the placeholder is never included."""
        if self._placeholder_index is None:
            return list(self.messages)
        return [
            message
            for index, message in enumerate(self.messages)
            if index != self._placeholder_index
        ]

    def append_user(self, content: str) -> ChatMessage:
        message = ChatMessage(role="user", content=content)
        self.messages.append(message)
        return message

    def begin_assistant(self) -> None:
        """Show an empty assistant message that will fill in as text streams."""
        self.messages.append(ChatMessage(role="assistant", content=""))
        self._placeholder_index = len(self.messages) - 1

    def replace_last(self, content: str) -> None:
        """Republish the placeholder with the full text accumulated so far."""
        if self._placeholder_index is None:
            raise RuntimeError("No assistant message is streaming")
        self.messages[self._placeholder_index] = ChatMessage(
            role="assistant", content=content
        )

    def settle(self) -> None:
        """Keep the streamed message as a regular one."""
        self._placeholder_index = None

    def discard_placeholder(self) -> None:
        """Remove the streaming assistant message."""
        if self._placeholder_index is not None:
            del self.messages[self._placeholder_index]
            self._placeholder_index = None

    def reset(self) -> None:
        """Start a new, unsaved conversation."""
        self.session_id = None
        self.title = None
        self.messages.clear()
        self._placeholder_index = None
