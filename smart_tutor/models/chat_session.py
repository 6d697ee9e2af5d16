"""Chat session database model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from smart_tutor.core.database import Base

DEFAULT_SESSION_TITLE = "New Chat"


class ChatSession(Base):
    """Tutor conversation owned by a user."""

    __tablename__ = "chat_sessions"
    __table_args__ = (
        Index("ix_chat_sessions_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(
        String(60), nullable=False, default=DEFAULT_SESSION_TITLE
    )
    # Set once the title has been derived from the first user message.
    title_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    course_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
