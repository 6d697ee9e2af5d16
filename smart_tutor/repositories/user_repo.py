"""User repository for database operations."""

from typing import Any

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from smart_tutor.models.chat_message import ChatMessage
from smart_tutor.models.chat_session import ChatSession
from smart_tutor.models.course import Course
from smart_tutor.models.generated_image import GeneratedImage
from smart_tutor.models.user import User


class UserRepository:
    """Encapsulates user and profile database queries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_email(self, email: str) -> User | None:
        """Find a user by email address."""
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: int) -> User | None:
        """Find a user by primary key."""
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def create(
        self,
        email: str,
        hashed_password: str,
        full_name: str,
        role: str = "user",
        **profile: Any,
    ) -> User:
        """Create a new user record."""
        user = User(
            email=email,
            hashed_password=hashed_password,
            full_name=full_name,
            role=role,
            **profile,
        )
        self._session.add(user)
        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with this email exists."""
        result = await self._session.execute(select(User.id).where(User.email == email))
        return result.scalar_one_or_none() is not None

    async def search(self, query: str | None = None) -> list[User]:
        """List users newest first, optionally filtered by name or email."""
        stmt = select(User)
        if query:
            pattern = f"%{query.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(User.full_name).like(pattern),
                    func.lower(User.email).like(pattern),
                )
            )
        result = await self._session.execute(
            stmt.order_by(User.created_at.desc(), User.id.desc())
        )
        return list(result.scalars().all())

    async def update_fields(self, user_id: int, **values: Any) -> None:
        """Update the given columns of a user."""
        if not values:
            return
        await self._session.execute(
            update(User).where(User.id == user_id).values(**values)
        )

    async def delete(self, user_id: int) -> None:
        """Hard-delete a user with their chat history and images.

        Courses the user authored stay in the catalog without a tutor.
        """
        session_ids = select(ChatSession.id).where(ChatSession.user_id == user_id)
        await self._session.execute(
            delete(ChatMessage).where(ChatMessage.session_id.in_(session_ids))
        )
        await self._session.execute(
            delete(ChatSession).where(ChatSession.user_id == user_id)
        )
        await self._session.execute(
            delete(GeneratedImage).where(GeneratedImage.user_id == user_id)
        )
        await self._session.execute(
            update(Course).where(Course.tutor_id == user_id).values(tutor_id=None)
        )
        await self._session.execute(delete(User).where(User.id == user_id))

    async def refresh(self, user: User) -> None:
        """Reload a user's columns after a bulk update."""
        await self._session.refresh(user)
