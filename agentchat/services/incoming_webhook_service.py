"""Accepts replies that agents push back asynchronously."""

import json
from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from agentchat.models.message import SenderKind
from agentchat.repositories.chat_repo import ChatRepository

logger = structlog.get_logger()


@dataclass(frozen=True)
class IncomingResult:
    """Status code and JSON body for the agent."""

    status_code: int
    body: dict[str, Any]


class IncomingWebhookService:
    """Persist an agent-initiated message into an existing chat.

    Like the relay, this answers every request with a plain ``{error}`` or
    ``{success}`` body and never raises.
    """

    def __init__(self, session: AsyncSession, chat_repo: ChatRepository) -> None:
        self._session = session
        self._chat_repo = chat_repo

    async def handle(self, raw_body: bytes) -> IncomingResult:
        """Validate the push and append it to the chat as an agent message."""
        try:
            body = json.loads(raw_body)
            if not isinstance(body, dict):
                body = {}
            chat_id = body.get("chat_id")
            content = body.get("content")
            user_id = body.get("user_id")

            if not chat_id or not content:
                return IncomingResult(400, {"error": "Missing required fields"})

            chat = await self._chat_repo.find_chat_by_id(str(chat_id))
            if chat is None or (user_id and chat.owner_id != user_id):
                return IncomingResult(404, {"error": "Chat not found"})

            await self._chat_repo.create_message(
                chat.id, SenderKind.AGENT, str(content)
            )
            await self._chat_repo.touch_chat(chat)
            await self._session.commit()
        except Exception:
            logger.exception("Incoming webhook failed")
            await self._session.rollback()
            return IncomingResult(500, {"error": "Internal server error"})

        logger.info("Agent message received", chat_id=chat.id)
        return IncomingResult(200, {"success": True})
