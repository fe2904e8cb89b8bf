"""Unit tests for ChatRepository."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from agentchat.models.agent import Agent
from agentchat.models.chat import Chat
from agentchat.models.message import Message, SenderKind
from agentchat.models.user import User
from agentchat.repositories.chat_repo import ChatRepository

BASE_TS = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def chat_repo(db_session: AsyncSession) -> ChatRepository:
    """Create a ChatRepository backed by the test DB session."""
    return ChatRepository(db_session)


async def _create_user(db_session: AsyncSession, email: str = "repo@test.com") -> str:
    user = User(email=email, hashed_password="hashed")
    db_session.add(user)
    await db_session.flush()
    return user.id


async def _create_chat_at(
    db_session: AsyncSession, owner_id: str, updated_at: datetime
) -> Chat:
    chat = Chat(owner_id=owner_id, created_at=updated_at, updated_at=updated_at)
    db_session.add(chat)
    await db_session.flush()
    return chat


async def _add_message_at(
    db_session: AsyncSession,
    chat_id: str,
    content: str,
    created_at: datetime,
    sender_kind: SenderKind = SenderKind.USER,
) -> None:
    db_session.add(
        Message(
            chat_id=chat_id,
            sender_kind=sender_kind.value,
            content=content,
            created_at=created_at,
        )
    )
    await db_session.flush()


class TestChats:
    """Tests for chat CRUD."""

    async def test_create_and_find(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        owner_id = await _create_user(db_session)
        chat = await chat_repo.create_chat(owner_id=owner_id)

        found = await chat_repo.find_chat_by_id(chat.id)
        assert found is not None
        assert found.owner_id == owner_id
        assert found.agent_id is None

    async def test_find_missing(self, chat_repo: ChatRepository) -> None:
        assert await chat_repo.find_chat_by_id("missing") is None

    async def test_touch_moves_updated_at(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        owner_id = await _create_user(db_session)
        chat = await _create_chat_at(db_session, owner_id, BASE_TS)

        await chat_repo.touch_chat(chat)

        assert chat.updated_at > BASE_TS

    async def test_delete_chat_removes_messages(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        owner_id = await _create_user(db_session)
        chat = await chat_repo.create_chat(owner_id=owner_id)
        await chat_repo.create_message(chat.id, SenderKind.USER, "hi", owner_id)

        await chat_repo.delete_chat(chat)

        assert await chat_repo.find_chat_by_id(chat.id) is None
        assert await chat_repo.find_messages_by_chat_id(chat.id) == []


class TestFindChatsByOwner:
    """Tests for the chat list query."""

    async def test_most_recent_first(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        owner_id = await _create_user(db_session)
        old = await _create_chat_at(db_session, owner_id, BASE_TS)
        new = await _create_chat_at(db_session, owner_id, BASE_TS + timedelta(hours=1))
        mid = await _create_chat_at(
            db_session, owner_id, BASE_TS + timedelta(minutes=30)
        )

        rows = await chat_repo.find_chats_by_owner(owner_id)

        assert [r.id for r in rows] == [new.id, mid.id, old.id]

    async def test_only_owner_chats(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        mine = await _create_user(db_session, "mine@test.com")
        theirs = await _create_user(db_session, "theirs@test.com")
        await _create_chat_at(db_session, theirs, BASE_TS)
        chat = await _create_chat_at(db_session, mine, BASE_TS)

        rows = await chat_repo.find_chats_by_owner(mine)

        assert [r.id for r in rows] == [chat.id]

    async def test_last_message_preview(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        owner_id = await _create_user(db_session)
        chat = await _create_chat_at(db_session, owner_id, BASE_TS)
        empty = await _create_chat_at(db_session, owner_id, BASE_TS)
        await _add_message_at(db_session, chat.id, "first", BASE_TS)
        await _add_message_at(
            db_session, chat.id, "latest", BASE_TS + timedelta(seconds=2)
        )
        await _add_message_at(
            db_session, chat.id, "middle", BASE_TS + timedelta(seconds=1)
        )

        rows = {r.id: r for r in await chat_repo.find_chats_by_owner(owner_id)}

        assert rows[chat.id].last_message == "latest"
        assert rows[empty.id].last_message is None

    async def test_includes_agent(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        owner_id = await _create_user(db_session)
        agent = Agent(owner_id=owner_id, name="Bot", webhook_url="https://a.test/h")
        db_session.add(agent)
        await db_session.flush()
        await chat_repo.create_chat(owner_id=owner_id, agent_id=agent.id)

        rows = await chat_repo.find_chats_by_owner(owner_id)

        assert rows[0].agent_id == agent.id
        assert rows[0].agent is not None
        assert rows[0].agent.name == "Bot"


class TestMessages:
    """Tests for message persistence."""

    async def test_chronological_order(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        owner_id = await _create_user(db_session)
        chat = await _create_chat_at(db_session, owner_id, BASE_TS)
        await _add_message_at(db_session, chat.id, "b", BASE_TS + timedelta(seconds=1))
        await _add_message_at(db_session, chat.id, "a", BASE_TS)
        await _add_message_at(db_session, chat.id, "c", BASE_TS + timedelta(seconds=2))

        messages = await chat_repo.find_messages_by_chat_id(chat.id)

        assert [m.content for m in messages] == ["a", "b", "c"]

    async def test_create_agent_message(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        owner_id = await _create_user(db_session)
        chat = await chat_repo.create_chat(owner_id=owner_id)

        message = await chat_repo.create_message(chat.id, SenderKind.AGENT, "reply")

        assert message.sender_kind == "agent"
        assert message.author_id is None
        assert message.created_at is not None

    async def test_same_timestamp_keeps_insert_order(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        owner_id = await _create_user(db_session)
        chat = await _create_chat_at(db_session, owner_id, BASE_TS)
        for i in range(20):
            await _add_message_at(db_session, chat.id, f"question {i}", BASE_TS)
            await _add_message_at(
                db_session, chat.id, f"answer {i}", BASE_TS, SenderKind.AGENT
            )

        messages = await chat_repo.find_messages_by_chat_id(chat.id)

        expected = [text for i in range(20) for text in (f"question {i}", f"answer {i}")]
        assert [m.content for m in messages] == expected
        assert messages[-1].sender_kind == SenderKind.AGENT.value

    async def test_same_timestamp_preview_is_latest_insert(
        self, chat_repo: ChatRepository, db_session: AsyncSession
    ) -> None:
        owner_id = await _create_user(db_session)
        chat = await _create_chat_at(db_session, owner_id, BASE_TS)
        await _add_message_at(db_session, chat.id, "question", BASE_TS)
        await _add_message_at(db_session, chat.id, "answer", BASE_TS, SenderKind.AGENT)

        rows = await chat_repo.find_chats_by_owner(owner_id)

        assert rows[0].last_message == "answer"
