"""Client for the tutor chat: history endpoints plus streamed exchanges."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from smart_tutor.client.transcript import ExchangeInProgressError, Transcript
from smart_tutor.schemas.chat_schema import ChatMessage
from smart_tutor.services.stream_consumer import StreamConsumer
from smart_tutor.services.title_service import derive_session_title

logger = structlog.get_logger()

GENERIC_FAILURE = "Failed to get AI response"
INTERRUPTED_NOTICE = "Response interrupted"

Notifier = Callable[[str], None]


class ExchangeFailedError(Exception):
    """The relay refused the exchange before streaming started."""


@dataclass(frozen=True)
class ExchangeResult:
    """What one exchange produced."""

    text: str
    completed: bool
    failed: bool = False
    error: str | None = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return GENERIC_FAILURE
    if isinstance(body, dict):
        if isinstance(body.get("error"), str):
            return body["error"]
        nested = body.get("error")
        if isinstance(nested, dict) and isinstance(nested.get("message"), str):
            return nested["message"]
    return GENERIC_FAILURE


class TutorChatClient:
    """Drives chat exchanges against a running tutor service.

    ``http`` must already carry the base URL and the bearer token.
    ``notify`` receives short user-facing messages (the equivalent of a
    toast); it defaults to logging them.
    """

    def __init__(self, http: httpx.AsyncClient, notify: Notifier | None = None) -> None:
        self._http = http
        self._notify = notify or (lambda text: logger.info("Notification", text=text))

    # --- History ---

    async def list_sessions(self) -> list[dict[str, Any]]:
        response = await self._http.get("/api/v1/chat-sessions")
        response.raise_for_status()
        return response.json()["data"]

    async def open_session(self, session_id: int) -> Transcript:
        """Load a stored session into a new transcript."""
        response = await self._http.get(f"/api/v1/chat-sessions/{session_id}/messages")
        response.raise_for_status()
        data = response.json()["data"]
        return Transcript(
            session_id=session_id,
            title=data["title"],
            messages=[
                ChatMessage(role=m["role"], content=m["content"])
                for m in data["messages"]
            ],
        )

    async def delete_session(self, session_id: int) -> None:
        response = await self._http.delete(f"/api/v1/chat-sessions/{session_id}")
        response.raise_for_status()

    async def _create_session(self, course_id: str | None) -> dict[str, Any]:
        response = await self._http.post(
            "/api/v1/chat-sessions", json={"course_id": course_id}
        )
        response.raise_for_status()
        return response.json()["data"]

    async def _save_message(self, session_id: int, role: str, content: str) -> None:
        response = await self._http.post(
            f"/api/v1/chat-sessions/{session_id}/messages",
            json={"role": role, "content": content},
        )
        response.raise_for_status()

    # --- Exchange ---

    async def send(
        self,
        transcript: Transcript,
        text: str,
        course_id: str | None = None,
        on_update: Callable[[str], None] | None = None,
    ) -> ExchangeResult | None:
        """Send ``text`` and stream the tutor's answer into ``transcript``.

        Returns None for blank input. Raises ``ExchangeInProgressError`` if
        the transcript already has an exchange streaming.
        """
        content = text.strip()
        if not content:
            return None
        if transcript.in_flight:
            raise ExchangeInProgressError("An answer is still streaming")

        transcript.in_flight = True
        try:
            return await self._exchange(transcript, content, course_id, on_update)
        finally:
            transcript.in_flight = False

    async def _exchange(
        self,
        transcript: Transcript,
        content: str,
        course_id: str | None,
        on_update: Callable[[str], None] | None,
    ) -> ExchangeResult:
        first_user_turn = not any(m.role == "user" for m in transcript.messages)
        try:
            if transcript.session_id is None:
                session = await self._create_session(course_id)
                transcript.session_id = session["id"]
                transcript.title = session["title"]
            await self._save_message(transcript.session_id, "user", content)
        except httpx.HTTPError as exc:
            logger.warning("Could not save the message", error=str(exc))
            self._notify("Failed to save message")
            return ExchangeResult(text="", completed=False, failed=True, error=str(exc))

        # Only a persisted turn becomes history for later exchanges.
        transcript.append_user(content)
        if first_user_turn:
            # Same title the server derived from this message.
            transcript.title = derive_session_title(content)
        history = transcript.history()

        def publish(accumulated: str) -> None:
            transcript.replace_last(accumulated)
            if on_update is not None:
                on_update(accumulated)

        transcript.begin_assistant()
        consumer = StreamConsumer(on_update=publish)
        body: dict[str, Any] = {"messages": [m.model_dump() for m in history]}
        if course_id:
            body["courseId"] = course_id

        try:
            async with self._http.stream("POST", "/api/v1/chat", json=body) as response:
                if response.is_error:
                    await response.aread()
                    raise ExchangeFailedError(_error_message(response))
                await consumer.consume(response.aiter_bytes())
        except (httpx.HTTPError, ExchangeFailedError) as exc:
            if not consumer.text:
                logger.warning("Chat exchange failed", error=str(exc))
                transcript.discard_placeholder()
                message = str(exc) if isinstance(exc, ExchangeFailedError) else GENERIC_FAILURE
                self._notify(message)
                return ExchangeResult(text="", completed=False, failed=True, error=message)
            logger.warning("Chat stream dropped", error=str(exc), chars=len(consumer.text))

        return await self._finish(transcript, consumer)

    async def _finish(self, transcript: Transcript, consumer: StreamConsumer) -> ExchangeResult:
        text = consumer.text
        if not text:
            transcript.discard_placeholder()
            if not consumer.completed:
                self._notify(INTERRUPTED_NOTICE)
            return ExchangeResult(text="", completed=consumer.completed)

        transcript.settle()
        if not consumer.completed:
            self._notify(INTERRUPTED_NOTICE)
        try:
            await self._save_message(transcript.session_id, "assistant", text)
        except httpx.HTTPError as exc:
            logger.warning("Could not save the answer", error=str(exc))
            self._notify("Failed to save the tutor's answer")
        return ExchangeResult(text=text, completed=consumer.completed)
