"""Chat repository for session and message database operations."""

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from smart_tutor.models.chat_message import ChatMessage
from smart_tutor.models.chat_session import ChatSession


class ChatRepository:
    """Encapsulates chat session and message database queries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_session_by_id(self, session_id: int) -> ChatSession | None:
        """Find a chat session by primary key."""
        result = await self._session.execute(
            select(ChatSession).where(ChatSession.id == session_id)
        )
        return result.scalar_one_or_none()

    async def find_sessions_by_user(self, user_id: int) -> list[ChatSession]:
        """List a user's sessions, newest first."""
        result = await self._session.execute(
            select(ChatSession)
            .where(ChatSession.user_id == user_id)
            .order_by(ChatSession.created_at.desc(), ChatSession.id.desc())
        )
        return list(result.scalars().all())

    async def count_sessions_by_user(self, user_id: int) -> int:
        """Count a user's sessions."""
        result = await self._session.execute(
            select(func.count(ChatSession.id)).where(ChatSession.user_id == user_id)
        )
        return int(result.scalar_one())

    async def create_session(
        self,
        user_id: int,
        course_id: str | None = None,
    ) -> ChatSession:
        """Create a new, untitled chat session."""
        session = ChatSession(user_id=user_id, course_id=course_id)
        self._session.add(session)
        await self._session.flush()
        await self._session.refresh(session)
        return session

    async def lock_session_title(self, session_id: int, title: str) -> None:
        """Set the derived title; a session whose title is already locked is left as is."""
        await self._session.execute(
            update(ChatSession)
            .where(ChatSession.id == session_id, ChatSession.title_locked.is_(False))
            .values(title=title, title_locked=True)
        )

    async def delete_session(self, session_id: int) -> None:
        """Hard-delete a session together with its messages."""
        await self._session.execute(
            delete(ChatMessage).where(ChatMessage.session_id == session_id)
        )
        await self._session.execute(
            delete(ChatSession).where(ChatSession.id == session_id)
        )

    async def find_messages_by_session_id(self, session_id: int) -> list[ChatMessage]:
        """Retrieve all messages for a session in chronological order."""
        result = await self._session.execute(
            select(ChatMessage)
            .where(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.id.asc())
        )
        return list(result.scalars().all())

    async def count_messages(self, session_id: int) -> int:
        """Count the messages stored for a session."""
        result = await self._session.execute(
            select(func.count(ChatMessage.id)).where(
                ChatMessage.session_id == session_id
            )
        )
        return int(result.scalar_one())

    async def create_message(
        self,
        session_id: int,
        role: str,
        content: str,
    ) -> ChatMessage:
        """Append a single message to a session."""
        message = ChatMessage(
            session_id=session_id,
            role=role,
            content=content,
        )
        self._session.add(message)
        await self._session.flush()
        await self._session.refresh(message)
        return message
