"""Chat history endpoints: sessions and their messages."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from smart_tutor.dependencies import get_chat_session_service, require_role
from smart_tutor.schemas.response_schema import ApiResponse, success_response
from smart_tutor.schemas.session_schema import (
    AppendMessageRequest,
    ChatSessionResponse,
    CreateSessionRequest,
    MessageResponse,
    SessionMessagesResponse,
)
from smart_tutor.services.chat_session_service import ChatSessionService

router = APIRouter(
    prefix="/api/v1/chat-sessions",
    tags=["chat-sessions"],
    dependencies=[Depends(require_role("user", "admin"))],
)

ChatSessionServiceDep = Annotated[
    ChatSessionService, Depends(get_chat_session_service)
]


@router.get("", response_model=ApiResponse[list[ChatSessionResponse]])
async def list_sessions(service: ChatSessionServiceDep) -> dict:
    """List the current user's chat sessions, newest first."""
    result = await service.list_sessions()
    return success_response(result)


@router.post(
    "",
    response_model=ApiResponse[ChatSessionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    body: CreateSessionRequest,
    service: ChatSessionServiceDep,
) -> dict:
    """Open a new chat session."""
    result = await service.create_session(course_id=body.course_id)
    return success_response(result, status=201)


@router.delete("/{session_id}", response_model=ApiResponse[None])
async def delete_session(session_id: int, service: ChatSessionServiceDep) -> dict:
    """Delete a chat session and its messages."""
    await service.delete_session(session_id)
    return success_response(None, message="Chat session deleted")


@router.get(
    "/{session_id}/messages",
    response_model=ApiResponse[SessionMessagesResponse],
)
async def get_messages(session_id: int, service: ChatSessionServiceDep) -> dict:
    """Get all messages of a session in order."""
    result = await service.get_messages(session_id)
    return success_response(result)


@router.post(
    "/{session_id}/messages",
    response_model=ApiResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
)
async def append_message(
    session_id: int,
    body: AppendMessageRequest,
    service: ChatSessionServiceDep,
) -> dict:
    """Persist one message of an exchange."""
    result = await service.append_message(session_id, body.role, body.content)
    return success_response(result, status=201)
