"""Tests for KnowledgeService and the settings repository."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from smart_tutor.models.admin_setting import BOT_KNOWLEDGE_KEY
from smart_tutor.repositories.settings_repo import SettingsRepository
from smart_tutor.services.knowledge_service import KnowledgeService


@pytest.fixture
def repo(db_session: AsyncSession) -> SettingsRepository:
    return SettingsRepository(db_session)


class TestKnowledgeService:
    """Tests for reading and replacing bot knowledge."""

    async def test_empty_by_default(self, repo: SettingsRepository) -> None:
        result = await KnowledgeService(repo).get_knowledge()
        assert result.knowledge == ""

    async def test_update_then_read(self, repo: SettingsRepository) -> None:
        service = KnowledgeService(repo)
        await service.update_knowledge("Term starts in May.", admin_id=1)
        await service.update_knowledge("Term starts in June.", admin_id=1)
        assert (await service.get_knowledge()).knowledge == "Term starts in June."
        assert await repo.get_value(BOT_KNOWLEDGE_KEY) == "Term starts in June."

    async def test_missing_key(self, repo: SettingsRepository) -> None:
        assert await repo.get_value("nothing-here") is None
