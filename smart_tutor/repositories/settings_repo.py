"""Admin settings key/value repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from smart_tutor.models.admin_setting import AdminSetting


class SettingsRepository:
    """Reads and upserts single-row admin settings."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_value(self, key: str) -> str | None:
        """Return the value stored under ``key`` or None when absent."""
        result = await self._session.execute(
            select(AdminSetting.value).where(AdminSetting.key == key)
        )
        return result.scalar_one_or_none()

    async def upsert(self, key: str, value: str) -> AdminSetting:
        """Update the row for ``key``, inserting it on first write."""
        result = await self._session.execute(
            select(AdminSetting).where(AdminSetting.key == key)
        )
        setting = result.scalar_one_or_none()
        if setting is None:
            setting = AdminSetting(key=key, value=value)
            self._session.add(setting)
        else:
            setting.value = value
        await self._session.flush()
        await self._session.refresh(setting)
        return setting


class ScopedSettingsReader:
    """Reads one setting per call through its own short-lived session.

    For callers that must not hold a request session open, such as the chat
    relay whose response outlives the read by the length of a stream.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_value(self, key: str) -> str | None:
        async with self._session_factory() as session:
            return await SettingsRepository(session).get_value(key)
