"""Tests for SettingsRepository and ScopedSettingsReader."""

from sqlalchemy.ext.asyncio import AsyncSession

from smart_tutor.models.admin_setting import BOT_KNOWLEDGE_KEY
from smart_tutor.repositories.settings_repo import (
    ScopedSettingsReader,
    SettingsRepository,
)
from tests.support import test_session_factory


class TestSettingsRepository:
    async def test_missing_key(self, db_session: AsyncSession) -> None:
        assert await SettingsRepository(db_session).get_value("absent") is None

    async def test_upsert_inserts_then_updates(self, db_session: AsyncSession) -> None:
        repo = SettingsRepository(db_session)
        await repo.upsert(BOT_KNOWLEDGE_KEY, "v1")
        await repo.upsert(BOT_KNOWLEDGE_KEY, "v2")
        assert await repo.get_value(BOT_KNOWLEDGE_KEY) == "v2"


class TestScopedSettingsReader:
    async def test_reads_committed_value(self, db_session: AsyncSession) -> None:
        await SettingsRepository(db_session).upsert(BOT_KNOWLEDGE_KEY, "Fridays")
        await db_session.commit()

        reader = ScopedSettingsReader(test_session_factory)

        assert await reader.get_value(BOT_KNOWLEDGE_KEY) == "Fridays"
        assert await reader.get_value("absent") is None
