"""AI image generation and the user's image gallery."""

import structlog

from smart_tutor.core.exceptions import AuthorizationError, ImageNotFoundError
from smart_tutor.repositories.image_repo import ImageRepository
from smart_tutor.schemas.image_schema import GeneratedImageResponse
from smart_tutor.services.gateway_client import GatewayClient

logger = structlog.get_logger()


class ImageService:
    """Generates images through the gateway and keeps them per user."""

    def __init__(
        self,
        gateway: GatewayClient,
        image_repo: ImageRepository,
        user_id: int,
    ) -> None:
        self._gateway = gateway
        self._image_repo = image_repo
        self._user_id = user_id

    async def generate(self, prompt: str) -> GeneratedImageResponse:
        image_url = await self._gateway.generate_image(prompt)
        image = await self._image_repo.create(
            user_id=self._user_id, prompt=prompt, image_url=image_url
        )
        logger.info("Image generated", image_id=image.id, user_id=self._user_id)
        return GeneratedImageResponse.model_validate(image)

    async def list_images(self) -> list[GeneratedImageResponse]:
        images = await self._image_repo.find_by_user(self._user_id)
        return [GeneratedImageResponse.model_validate(i) for i in images]

    async def delete_image(self, image_id: int) -> None:
        image = await self._image_repo.find_by_id(image_id)
        if image is None:
            raise ImageNotFoundError
        if image.user_id != self._user_id:
            raise AuthorizationError(message="Not authorized to delete this image")
        await self._image_repo.delete(image_id)
