"""Chat repository for chat and message database operations."""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from agentchat.core.database import utc_now
from agentchat.models.agent import Agent
from agentchat.models.chat import Chat
from agentchat.models.message import Message, SenderKind


@dataclass(frozen=True)
class ChatWithPreview:
    """Immutable result object for chat list queries."""

    id: str
    owner_id: str
    agent_id: str | None
    agent: Agent | None
    last_message: str | None
    created_at: datetime
    updated_at: datetime


class ChatRepository:
    """Encapsulates chat and message database queries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- Chats ---

    async def create_chat(self, owner_id: str, agent_id: str | None = None) -> Chat:
        """Create a new chat."""
        chat = Chat(owner_id=owner_id, agent_id=agent_id)
        self._session.add(chat)
        await self._session.flush()
        await self._session.refresh(chat)
        return chat

    async def find_chat_by_id(self, chat_id: str) -> Chat | None:
        """Find a chat by primary key."""
        result = await self._session.execute(select(Chat).where(Chat.id == chat_id))
        return result.scalar_one_or_none()

    async def find_chats_by_owner(self, owner_id: str) -> list[ChatWithPreview]:
        """Fetch a user's chats, most recently updated first.

        Each row carries its agent (if any) and the content of its latest
        message by ``created_at``, ties going to the later insert.
        """
        # Correlated scalar subquery: latest message content per chat
        last_message_subq = (
            select(Message.content)
            .where(Message.chat_id == Chat.id)
            .order_by(Message.created_at.desc(), Message.seq.desc())
            .limit(1)
            .correlate(Chat)
            .scalar_subquery()
        )

        stmt = (
            select(Chat, Agent, last_message_subq.label("last_message"))
            .outerjoin(Agent, Chat.agent_id == Agent.id)
            .where(Chat.owner_id == owner_id)
            .order_by(Chat.updated_at.desc(), Chat.id.desc())
        )

        result = await self._session.execute(stmt)
        return [
            ChatWithPreview(
                id=chat.id,
                owner_id=chat.owner_id,
                agent_id=chat.agent_id,
                agent=agent,
                last_message=last_message,
                created_at=chat.created_at,
                updated_at=chat.updated_at,
            )
            for chat, agent, last_message in result
        ]

    async def touch_chat(self, chat: Chat) -> None:
        """Bump ``updated_at`` so the chat sorts first in the list."""
        chat.updated_at = utc_now()
        await self._session.flush()

    async def update_chat_agent(self, chat: Chat, agent_id: str | None) -> Chat:
        """Bind the chat to another agent, or unbind it."""
        chat.agent_id = agent_id
        await self._session.flush()
        return chat

    async def delete_chat(self, chat: Chat) -> None:
        """Delete a chat together with its whole transcript."""
        await self._session.execute(delete(Message).where(Message.chat_id == chat.id))
        await self._session.delete(chat)
        await self._session.flush()

    # --- Messages ---

    async def find_messages_by_chat_id(self, chat_id: str) -> list[Message]:
        """Retrieve all messages for a chat in chronological order."""
        result = await self._session.execute(
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.asc(), Message.seq.asc())
        )
        return list(result.scalars().all())

    async def create_message(
        self,
        chat_id: str,
        sender_kind: SenderKind,
        content: str,
        author_id: str | None = None,
    ) -> Message:
        """Append a message to a chat."""
        message = Message(
            chat_id=chat_id,
            sender_kind=sender_kind.value,
            content=content,
            author_id=author_id,
        )
        self._session.add(message)
        await self._session.flush()
        await self._session.refresh(message)
        return message
