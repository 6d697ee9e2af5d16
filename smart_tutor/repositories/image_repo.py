"""Generated image repository."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from smart_tutor.models.generated_image import GeneratedImage


class ImageRepository:
    """Encapsulates generated image queries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user_id: int, prompt: str, image_url: str) -> GeneratedImage:
        """Store a generated image."""
        image = GeneratedImage(user_id=user_id, prompt=prompt, image_url=image_url)
        self._session.add(image)
        await self._session.flush()
        await self._session.refresh(image)
        return image

    async def find_by_id(self, image_id: int) -> GeneratedImage | None:
        """Find an image by primary key."""
        result = await self._session.execute(
            select(GeneratedImage).where(GeneratedImage.id == image_id)
        )
        return result.scalar_one_or_none()

    async def find_by_user(self, user_id: int) -> list[GeneratedImage]:
        """List a user's images, newest first."""
        result = await self._session.execute(
            select(GeneratedImage)
            .where(GeneratedImage.user_id == user_id)
            .order_by(GeneratedImage.created_at.desc(), GeneratedImage.id.desc())
        )
        return list(result.scalars().all())

    async def count_by_user(self, user_id: int) -> int:
        """Count a user's images."""
        result = await self._session.execute(
            select(func.count(GeneratedImage.id)).where(
                GeneratedImage.user_id == user_id
            )
        )
        return int(result.scalar_one())

    async def delete(self, image_id: int) -> None:
        """Hard-delete an image."""
        await self._session.execute(
            delete(GeneratedImage).where(GeneratedImage.id == image_id)
        )
