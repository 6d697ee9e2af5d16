"""HTTP client for the OpenAI-compatible AI completion gateway."""

from collections.abc import AsyncIterator
from typing import Any

import httpx
import structlog

from smart_tutor.core.exceptions import (
    GatewayQuotaExceededError,
    GatewayRateLimitedError,
    GatewayUnconfiguredError,
    GatewayUpstreamError,
)
from smart_tutor.core.settings import GatewayConfig

logger = structlog.get_logger()


class GatewayStream:
    """An open, successful streamed completion response.

    The body is exposed as raw byte chunks exactly as received. Iterating
    to the end, or calling :meth:`aclose`, releases the connection.
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield body chunks as they arrive, then close the response."""
        try:
            async for chunk in self._response.aiter_bytes():
                if chunk:
                    yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()


class GatewayClient:
    """Performs one upstream call per exchange. No retries are attempted."""

    def __init__(
        self,
        config: GatewayConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(None, connect=config.connect_timeout_seconds),
        )

    def ensure_configured(self) -> None:
        """Raise ``GatewayUnconfiguredError`` when no credential is set."""
        if not self._config.is_configured:
            logger.error("AI gateway API key is not configured")
            raise GatewayUnconfiguredError

    async def open_chat_stream(self, messages: list[dict[str, str]]) -> GatewayStream:
        """Request a streamed chat completion for ``messages``.

        Returns once the upstream status line is in. Error statuses are
        mapped to the gateway error taxonomy and the response is closed.
        """
        self.ensure_configured()
        request = self._http.build_request(
            "POST",
            self._config.completions_url,
            headers=self._headers(),
            json={
                "model": self._config.chat_model,
                "messages": messages,
                "stream": True,
            },
        )
        logger.info(
            "Calling AI gateway",
            model=self._config.chat_model,
            message_count=len(messages),
        )
        try:
            response = await self._http.send(request, stream=True)
        except httpx.HTTPError as exc:
            logger.exception("AI gateway request failed")
            raise GatewayUpstreamError from exc

        if response.is_error:
            try:
                body = (await response.aread()).decode("utf-8", errors="replace")
            finally:
                await response.aclose()
            self._raise_for_status(response.status_code, body)

        return GatewayStream(response)

    async def generate_image(self, prompt: str) -> str:
        """Generate one image for ``prompt`` and return its URL (often a data URL)."""
        self.ensure_configured()
        logger.info("Generating image", model=self._config.image_model)
        try:
            response = await self._http.post(
                self._config.completions_url,
                headers=self._headers(),
                json={
                    "model": self._config.image_model,
                    "messages": [{"role": "user", "content": prompt}],
                    "modalities": ["image", "text"],
                },
            )
        except httpx.HTTPError as exc:
            logger.exception("AI gateway request failed")
            raise GatewayUpstreamError from exc

        if response.is_error:
            self._raise_for_status(response.status_code, response.text)

        try:
            return self._extract_image_url(response.json())
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.warning("Gateway returned no image", body=response.text[:500])
            raise GatewayUpstreamError(message="No image was generated") from exc

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.api_key.get_secret_value()}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _raise_for_status(status_code: int, body: str) -> None:
        logger.error("AI gateway error", status=status_code, body=body[:500])
        if status_code == 429:
            raise GatewayRateLimitedError
        if status_code == 402:
            raise GatewayQuotaExceededError
        raise GatewayUpstreamError

    @staticmethod
    def _extract_image_url(payload: Any) -> str:
        url = payload["choices"][0]["message"]["images"][0]["image_url"]["url"]
        if not isinstance(url, str) or not url:
            raise ValueError("empty image url")
        return url
