"""Chat orchestration: transcripts, agent binding and the send-message flow."""

import json
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from agentchat.core.exceptions import (
    AgentNotFoundError,
    AuthenticationError,
    ChatBusyError,
    ChatNotFoundError,
    WebhookTimeoutError,
)
from agentchat.models.agent import Agent
from agentchat.models.chat import Chat
from agentchat.models.message import Message, SenderKind
from agentchat.repositories.agent_repo import AgentRepository
from agentchat.repositories.chat_repo import ChatRepository
from agentchat.schemas.agent_schema import AgentResponse
from agentchat.schemas.auth_schema import CurrentUser
from agentchat.schemas.chat_schema import (
    ChatDetailResponse,
    ChatListResponse,
    ChatMessagesResponse,
    ChatSummary,
    MessageResponse,
    SendMessageResponse,
    SendState,
    TypingResponse,
)
from agentchat.services.typing_service import TypingService
from agentchat.services.webhook_client import WebhookClient

logger = structlog.get_logger()

NO_RESPONSE_TEXT = "No response from agent"
SAME_ORIGIN_NOTE = (
    "\n\nNote: This may be due to same-origin (CORS) restrictions. Browsers "
    "block direct calls to external webhooks, so agent requests are sent "
    "through the server-side relay; check that the relay can reach the agent."
)


def build_failure_message(exc: Exception, webhook_url: str) -> str:
    """Human-readable transcript entry for a failed agent call."""
    if isinstance(exc, WebhookTimeoutError):
        text = (
            "Error: Request to agent timed out. Please check if the webhook URL "
            f"({webhook_url}) is correct and the service is running."
        )
    else:
        cause = str(exc) or "Could not reach the agent"
        text = (
            f"Error: {cause}. Please check if the webhook URL ({webhook_url}) "
            "is correct."
        )
    return text + SAME_ORIGIN_NOTE


def extract_reply(response: dict[str, Any], reply_field: str) -> str:
    """Pick the reply text out of a normalized agent response."""
    for field in (reply_field, "response"):
        value = response.get(field)
        if value:
            return value if isinstance(value, str) else json.dumps(value)
    return NO_RESPONSE_TEXT


class ChatService:
    """Per-request chat context for one user.

    Every write is followed by a full re-read of the affected entity
    (messages, chat list) instead of patching a cached copy.
    """

    def __init__(
        self,
        session: AsyncSession,
        chat_repo: ChatRepository,
        agent_repo: AgentRepository,
        webhook_client: WebhookClient,
        typing_service: TypingService,
        user: CurrentUser | None,
        reply_field: str = "output",
    ) -> None:
        self._session = session
        self._chat_repo = chat_repo
        self._agent_repo = agent_repo
        self._webhook_client = webhook_client
        self._typing = typing_service
        self._user = user
        self._reply_field = reply_field
        self.state = SendState.IDLE

    # --- Reads ---

    async def fetch_chats(self) -> ChatListResponse:
        """The user's chats, most recently updated first, with previews."""
        user = self._require_user()
        rows = await self._chat_repo.find_chats_by_owner(user.id)
        return ChatListResponse(chats=[ChatSummary.model_validate(r) for r in rows])

    async def fetch_messages(self, chat_id: str) -> ChatMessagesResponse:
        """All messages of an owned chat in chronological order."""
        chat = await self._get_owned_chat(chat_id)
        messages = await self._chat_repo.find_messages_by_chat_id(chat.id)
        return ChatMessagesResponse(chat_id=chat.id, messages=_to_responses(messages))

    async def select_chat(self, chat_id: str) -> ChatDetailResponse:
        """Open a chat: its summary, transcript and typing flag."""
        chat = await self._get_owned_chat(chat_id)
        messages = await self._chat_repo.find_messages_by_chat_id(chat.id)
        return ChatDetailResponse(
            chat=await self._summarize(chat, messages),
            messages=_to_responses(messages),
            is_typing=await self._typing.is_typing(chat.id),
        )

    async def is_typing(self, chat_id: str) -> TypingResponse:
        """Whether an agent reply is pending in an owned chat."""
        chat = await self._get_owned_chat(chat_id)
        return TypingResponse(
            chat_id=chat.id, is_typing=await self._typing.is_typing(chat.id)
        )

    # --- Writes ---

    async def create_chat(self) -> ChatSummary:
        """Start a new chat with no agent bound."""
        user = self._require_user()
        chat = await self._chat_repo.create_chat(owner_id=user.id)
        await self._session.commit()
        logger.info("Chat created", chat_id=chat.id, user_id=user.id)
        return await self._summarize(chat, [])

    async def set_chat_agent(self, chat_id: str, agent_id: str | None) -> ChatSummary:
        """Bind a chat to one of the user's agents, or unbind it."""
        user = self._require_user()
        chat = await self._get_owned_chat(chat_id)
        if agent_id is not None:
            if await self._agent_repo.find_owned(agent_id, user.id) is None:
                raise AgentNotFoundError
        await self._chat_repo.update_chat_agent(chat, agent_id)
        await self._session.commit()
        logger.info("Chat agent changed", chat_id=chat.id, agent_id=agent_id)
        messages = await self._chat_repo.find_messages_by_chat_id(chat.id)
        return await self._summarize(chat, messages)

    async def delete_chat(self, chat_id: str) -> None:
        """Delete an owned chat and its transcript."""
        chat = await self._get_owned_chat(chat_id)
        await self._chat_repo.delete_chat(chat)
        await self._session.commit()
        logger.info("Chat deleted", chat_id=chat_id)

    async def send_message(
        self, chat_id: str | None, content: str
    ) -> SendMessageResponse | None:
        """Post a user message and, if the chat has an agent, relay it.

        Without a signed-in user or a selected chat this is a no-op and
        returns ``None``. Agent failures never propagate: they are written to
        the transcript as an agent message. Store failures do propagate.
        """
        user = self._user
        if user is None or not chat_id:
            logger.info("Send skipped: no user or chat selected")
            return None

        chat = await self._get_owned_chat(chat_id)
        if not await self._typing.acquire_send_lock(chat.id):
            raise ChatBusyError

        try:
            self.state = SendState.PERSISTING_USER_MESSAGE
            await self._chat_repo.create_message(
                chat.id, SenderKind.USER, content, author_id=user.id
            )
            await self._chat_repo.touch_chat(chat)
            await self._session.commit()
            messages = await self._chat_repo.find_messages_by_chat_id(chat.id)

            agent = await self._resolve_agent(chat)
            if agent is not None:
                messages = await self._reply_from_agent(chat, agent, user, content)
        finally:
            self.state = SendState.IDLE
            await self._typing.release_send_lock(chat.id)

        chats = await self.fetch_chats()
        return SendMessageResponse(
            chat_id=chat.id,
            state=self.state,
            is_typing=False,
            messages=_to_responses(messages),
            chats=chats.chats,
        )

    # --- Internals ---

    async def _reply_from_agent(
        self, chat: Chat, agent: Agent, user: CurrentUser, content: str
    ) -> list[Message]:
        """Call the agent, persist its reply (or the failure), reload messages."""
        self.state = SendState.AWAITING_REPLY
        await self._typing.start_typing(chat.id)
        try:
            try:
                response = await self._webhook_client.send_message(
                    content,
                    chat.id,
                    user.id,
                    agent.webhook_url,
                    user_email=user.email,
                )
                reply = extract_reply(response, self._reply_field)
            except Exception as exc:
                logger.exception(
                    "Agent call failed",
                    chat_id=chat.id,
                    agent_id=agent.id,
                    webhook_url=agent.webhook_url,
                )
                reply = build_failure_message(exc, agent.webhook_url)

            self.state = SendState.PERSISTING_AGENT_REPLY
            await self._chat_repo.create_message(chat.id, SenderKind.AGENT, reply)
            await self._session.commit()
            return await self._chat_repo.find_messages_by_chat_id(chat.id)
        finally:
            await self._typing.stop_typing(chat.id)

    async def _resolve_agent(self, chat: Chat) -> Agent | None:
        """The chat's agent, if it has one that can be called."""
        if chat.agent_id is None:
            logger.info("Chat has no agent, skipping reply", chat_id=chat.id)
            return None
        agent = await self._agent_repo.find_owned(chat.agent_id, chat.owner_id)
        if agent is None or not agent.webhook_url:
            logger.warning(
                "Agent or webhook URL is missing",
                chat_id=chat.id,
                agent_id=chat.agent_id,
            )
            return None
        return agent

    async def _summarize(self, chat: Chat, messages: list[Message]) -> ChatSummary:
        agent = None
        if chat.agent_id is not None:
            agent = await self._agent_repo.find_owned(chat.agent_id, chat.owner_id)
        return ChatSummary(
            id=chat.id,
            agent_id=chat.agent_id,
            agent=AgentResponse.model_validate(agent) if agent else None,
            last_message=messages[-1].content if messages else None,
            created_at=chat.created_at,
            updated_at=chat.updated_at,
        )

    async def _get_owned_chat(self, chat_id: str) -> Chat:
        user = self._require_user()
        chat = await self._chat_repo.find_chat_by_id(chat_id)
        if chat is None or chat.owner_id != user.id:
            raise ChatNotFoundError
        return chat

    def _require_user(self) -> CurrentUser:
        if self._user is None:
            raise AuthenticationError(message="Not authenticated")
        return self._user


def _to_responses(messages: list[Message]) -> list[MessageResponse]:
    return [MessageResponse.model_validate(m) for m in messages]
