"""Admin-managed knowledge that is fed to the tutor."""

import structlog

from smart_tutor.models.admin_setting import BOT_KNOWLEDGE_KEY
from smart_tutor.repositories.settings_repo import SettingsRepository
from smart_tutor.schemas.admin_schema import BotKnowledgeResponse

logger = structlog.get_logger()


class KnowledgeService:
    """Reads and replaces the ``bot_knowledge`` setting."""

    def __init__(self, settings_repo: SettingsRepository) -> None:
        self._settings_repo = settings_repo

    async def get_knowledge(self) -> BotKnowledgeResponse:
        value = await self._settings_repo.get_value(BOT_KNOWLEDGE_KEY)
        return BotKnowledgeResponse(knowledge=value or "")

    async def update_knowledge(self, knowledge: str, admin_id: int) -> BotKnowledgeResponse:
        """Replace the knowledge text; the tutor uses it from the next exchange on."""
        setting = await self._settings_repo.upsert(BOT_KNOWLEDGE_KEY, knowledge)
        logger.info("Bot knowledge updated", admin_id=admin_id, length=len(knowledge))
        return BotKnowledgeResponse(knowledge=setting.value or "")
