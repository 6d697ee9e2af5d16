"""Chat relay: forwards a conversation to the AI gateway and streams the answer back."""

import json
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from smart_tutor.core.exceptions import ChatRequestError
from smart_tutor.dependencies import get_chat_relay_service, require_role
from smart_tutor.schemas.chat_schema import ChatRelayRequest
from smart_tutor.schemas.response_schema import RelayErrorResponse
from smart_tutor.services.chat_relay import SSE_HEADERS, ChatRelayService, relay_chunks

router = APIRouter(
    prefix="/api/v1/chat",
    tags=["chat"],
    dependencies=[Depends(require_role("user", "admin"))],
)

ChatRelayServiceDep = Annotated[ChatRelayService, Depends(get_chat_relay_service)]

_ERROR_RESPONSES = {
    status: {"model": RelayErrorResponse} for status in (400, 402, 429, 500)
}


@router.post(
    "",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"text/event-stream": {}}},
        **_ERROR_RESPONSES,
    },
)
async def relay_chat(
    request: Request,
    relay_service: ChatRelayServiceDep,
) -> StreamingResponse:
    """Relay ``{messages, courseId?}`` to the gateway as a streamed completion.

    The upstream event stream is passed through byte for byte. Failures
    before streaming starts are answered with ``{"error": message}``.
    """
    # Read the raw body so a malformed request is a 400, not a 422.
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ChatRequestError() from exc

    chat_request = ChatRelayRequest.from_payload(payload)
    stream = await relay_service.open_stream(chat_request)
    return StreamingResponse(
        relay_chunks(stream),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
