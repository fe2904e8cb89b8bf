"""Chat and message schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from agentchat.schemas.agent_schema import AgentResponse


class SendState(str, Enum):
    """Phases of a single send operation."""

    IDLE = "idle"
    PERSISTING_USER_MESSAGE = "persisting-user-message"
    AWAITING_REPLY = "awaiting-reply"
    PERSISTING_AGENT_REPLY = "persisting-agent-reply"


class MessageResponse(BaseModel):
    """Single message within a chat."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    chat_id: str
    author_id: str | None = None
    sender_kind: str
    content: str
    created_at: datetime


class ChatSummary(BaseModel):
    """Chat list entry, with its agent and last message preview."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    agent_id: str | None = None
    agent: AgentResponse | None = None
    last_message: str | None = None
    created_at: datetime
    updated_at: datetime


class ChatListResponse(BaseModel):
    """The current user's chats, most recently updated first."""

    model_config = ConfigDict(frozen=True)

    chats: list[ChatSummary]


class ChatDetailResponse(BaseModel):
    """A selected chat with its full transcript."""

    model_config = ConfigDict(frozen=True)

    chat: ChatSummary
    messages: list[MessageResponse]
    is_typing: bool = False


class ChatMessagesResponse(BaseModel):
    """All messages for a chat."""

    model_config = ConfigDict(frozen=True)

    chat_id: str
    messages: list[MessageResponse]


class SendMessageRequest(BaseModel):
    """User message to post into a chat."""

    content: str = Field(..., min_length=1, max_length=16000)


class SendMessageResponse(BaseModel):
    """Outcome of a send: reloaded transcript and chat list."""

    model_config = ConfigDict(frozen=True)

    chat_id: str
    state: SendState = SendState.IDLE
    is_typing: bool = False
    messages: list[MessageResponse]
    chats: list[ChatSummary]


class SetChatAgentRequest(BaseModel):
    """Bind a chat to an agent, or unbind it with ``null``."""

    agent_id: str | None = None


class TypingResponse(BaseModel):
    """Whether an agent reply is pending in a chat."""

    model_config = ConfigDict(frozen=True)

    chat_id: str
    is_typing: bool
