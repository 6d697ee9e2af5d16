"""Tests for ChatRepository."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from smart_tutor.models.chat_session import DEFAULT_SESSION_TITLE
from smart_tutor.models.user import User
from smart_tutor.repositories.chat_repo import ChatRepository


@pytest.fixture
def repo(db_session: AsyncSession) -> ChatRepository:
    return ChatRepository(db_session)


class TestSessions:
    """Tests for chat session operations."""

    async def test_create_session_defaults(
        self, repo: ChatRepository, student: User
    ) -> None:
        session = await repo.create_session(user_id=student.id, course_id="dlh-1")
        assert session.id is not None
        assert session.title == DEFAULT_SESSION_TITLE
        assert session.title_locked is False
        assert session.course_id == "dlh-1"

    async def test_find_sessions_newest_first(
        self, repo: ChatRepository, student: User
    ) -> None:
        first = await repo.create_session(user_id=student.id)
        second = await repo.create_session(user_id=student.id)
        sessions = await repo.find_sessions_by_user(student.id)
        assert [s.id for s in sessions] == [second.id, first.id]
        assert await repo.count_sessions_by_user(student.id) == 2

    async def test_lock_title_only_once(
        self, repo: ChatRepository, student: User, db_session: AsyncSession
    ) -> None:
        session = await repo.create_session(user_id=student.id)
        await repo.lock_session_title(session.id, "First question")
        await repo.lock_session_title(session.id, "Second question")
        await db_session.commit()
        await db_session.refresh(session)
        assert session.title == "First question"
        assert session.title_locked is True

    async def test_delete_session_removes_messages(
        self, repo: ChatRepository, student: User
    ) -> None:
        session = await repo.create_session(user_id=student.id)
        await repo.create_message(session.id, "user", "hi")
        await repo.delete_session(session.id)
        assert await repo.find_session_by_id(session.id) is None
        assert await repo.count_messages(session.id) == 0


class TestMessages:
    """Tests for message operations."""

    async def test_messages_in_insertion_order(
        self, repo: ChatRepository, student: User
    ) -> None:
        session = await repo.create_session(user_id=student.id)
        await repo.create_message(session.id, "user", "question")
        await repo.create_message(session.id, "assistant", "answer")
        await repo.create_message(session.id, "user", "follow-up")
        messages = await repo.find_messages_by_session_id(session.id)
        assert [(m.role, m.content) for m in messages] == [
            ("user", "question"),
            ("assistant", "answer"),
            ("user", "follow-up"),
        ]
