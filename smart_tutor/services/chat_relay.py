"""Streaming relay between the chat client and the AI gateway."""

from collections.abc import AsyncGenerator

import httpx
import structlog

from smart_tutor.schemas.chat_schema import ChatRelayRequest
from smart_tutor.services.gateway_client import GatewayClient, GatewayStream
from smart_tutor.services.prompt_assembler import PromptAssembler

logger = structlog.get_logger()

SSE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class ChatRelayService:
    """Assembles the prompt and opens the upstream stream for one exchange.

    The relay never looks inside stream chunks; it only translates status
    and headers.
    """

    def __init__(self, gateway: GatewayClient, assembler: PromptAssembler) -> None:
        self._gateway = gateway
        self._assembler = assembler

    async def open_stream(self, request: ChatRelayRequest) -> GatewayStream:
        """Open the upstream stream, raising a gateway error if it fails to start."""
        self._gateway.ensure_configured()
        system_prompt = await self._assembler.assemble(request.course_id)
        stream = await self._gateway.open_chat_stream(
            request.upstream_messages(system_prompt)
        )
        logger.info(
            "Streaming response from AI gateway",
            course_id=request.course_id,
            turns=len(request.messages),
        )
        return stream


async def relay_chunks(stream: GatewayStream) -> AsyncGenerator[bytes, None]:
    """Pass upstream bytes through unchanged.

    Once the 200 has been sent a failure can only end the body early; the
    client notices the missing ``[DONE]`` line.
    """
    relayed = 0
    try:
        async for chunk in stream.iter_bytes():
            relayed += len(chunk)
            yield chunk
    except httpx.HTTPError:
        logger.warning("Upstream stream interrupted", bytes_relayed=relayed, exc_info=True)
    finally:
        await stream.aclose()
    logger.debug("Relay finished", bytes_relayed=relayed)
