"""Chat API router: chats, transcripts and sending messages."""

from typing import Annotated

from fastapi import APIRouter, Depends

from agentchat.dependencies import get_chat_service
from agentchat.schemas.chat_schema import (
    ChatDetailResponse,
    ChatListResponse,
    ChatMessagesResponse,
    ChatSummary,
    SendMessageRequest,
    SendMessageResponse,
    SetChatAgentRequest,
    TypingResponse,
)
from agentchat.schemas.response_schema import ApiResponse, success_response
from agentchat.services.chat_service import ChatService

router = APIRouter(prefix="/api/v1/chats", tags=["chats"])

ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]


@router.get("", response_model=ApiResponse[ChatListResponse])
async def list_chats(service: ChatServiceDep) -> dict:
    """List the current user's chats, most recently updated first."""
    return success_response(await service.fetch_chats())


@router.post("", response_model=ApiResponse[ChatSummary], status_code=201)
async def create_chat(service: ChatServiceDep) -> dict:
    """Start a new chat."""
    return success_response(await service.create_chat(), status=201)


@router.get("/{chat_id}", response_model=ApiResponse[ChatDetailResponse])
async def get_chat(chat_id: str, service: ChatServiceDep) -> dict:
    """Open a chat with its transcript."""
    return success_response(await service.select_chat(chat_id))


@router.delete("/{chat_id}", response_model=ApiResponse[None])
async def delete_chat(chat_id: str, service: ChatServiceDep) -> dict:
    """Delete a chat and all of its messages."""
    await service.delete_chat(chat_id)
    return success_response(None, message="Chat deleted")


@router.put("/{chat_id}/agent", response_model=ApiResponse[ChatSummary])
async def set_chat_agent(
    chat_id: str, request: SetChatAgentRequest, service: ChatServiceDep
) -> dict:
    """Bind the chat to an agent, or unbind it."""
    result = await service.set_chat_agent(chat_id, request.agent_id)
    return success_response(result)


@router.get("/{chat_id}/messages", response_model=ApiResponse[ChatMessagesResponse])
async def get_messages(chat_id: str, service: ChatServiceDep) -> dict:
    """Return the chat's transcript in chronological order."""
    return success_response(await service.fetch_messages(chat_id))


@router.post("/{chat_id}/messages", response_model=ApiResponse[SendMessageResponse])
async def send_message(
    chat_id: str, request: SendMessageRequest, service: ChatServiceDep
) -> dict:
    """Post a message; if the chat has an agent, wait for its reply."""
    result = await service.send_message(chat_id, request.content)
    return success_response(result)


@router.get("/{chat_id}/typing", response_model=ApiResponse[TypingResponse])
async def get_typing(chat_id: str, service: ChatServiceDep) -> dict:
    """Whether an agent reply is pending."""
    return success_response(await service.is_typing(chat_id))
