"""Service layer for chat history: sessions and their messages."""

import structlog

from smart_tutor.core.exceptions import AuthorizationError, SessionNotFoundError
from smart_tutor.models.chat_session import ChatSession
from smart_tutor.repositories.chat_repo import ChatRepository
from smart_tutor.schemas.session_schema import (
    ChatSessionResponse,
    MessageResponse,
    SessionMessagesResponse,
)
from smart_tutor.services.title_service import derive_session_title

logger = structlog.get_logger()


class ChatSessionService:
    """Manages the current user's chat sessions."""

    def __init__(self, chat_repo: ChatRepository, user_id: int) -> None:
        self._chat_repo = chat_repo
        self._user_id = user_id

    async def list_sessions(self) -> list[ChatSessionResponse]:
        """Return the user's sessions, newest first."""
        sessions = await self._chat_repo.find_sessions_by_user(self._user_id)
        return [ChatSessionResponse.model_validate(s) for s in sessions]

    async def create_session(self, course_id: str | None = None) -> ChatSessionResponse:
        """Open a new, empty session."""
        session = await self._chat_repo.create_session(
            user_id=self._user_id, course_id=course_id
        )
        logger.info("Chat session created", session_id=session.id, user_id=self._user_id)
        return ChatSessionResponse.model_validate(session)

    async def delete_session(self, session_id: int) -> None:
        """Delete a session and all of its messages."""
        await self._get_owned_session(session_id)
        await self._chat_repo.delete_session(session_id)
        logger.info("Chat session deleted", session_id=session_id, user_id=self._user_id)

    async def get_messages(self, session_id: int) -> SessionMessagesResponse:
        """Return a session's messages in chronological order."""
        session = await self._get_owned_session(session_id)
        messages = await self._chat_repo.find_messages_by_session_id(session.id)
        return SessionMessagesResponse(
            session_id=session.id,
            title=session.title,
            messages=[MessageResponse.model_validate(m) for m in messages],
        )

    async def append_message(
        self, session_id: int, role: str, content: str
    ) -> MessageResponse:
        """Persist one message.

        The first user message of a session also fixes the session title;
        later messages never change it.
        """
        session = await self._get_owned_session(session_id)
        message = await self._chat_repo.create_message(
            session_id=session.id, role=role, content=content
        )
        if role == "user" and not session.title_locked:
            await self._chat_repo.lock_session_title(
                session.id, derive_session_title(content)
            )
        return MessageResponse.model_validate(message)

    async def _get_owned_session(self, session_id: int) -> ChatSession:
        session = await self._chat_repo.find_session_by_id(session_id)
        if session is None:
            raise SessionNotFoundError
        if session.user_id != self._user_id:
            raise AuthorizationError(message="Not authorized to access this chat")
        return session
