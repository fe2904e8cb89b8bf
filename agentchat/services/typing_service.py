"""Redis-backed typing flag and per-chat send lock."""

import redis.asyncio as redis

TYPING_PREFIX = "chat_typing:"
SEND_LOCK_PREFIX = "chat_send_lock:"


class TypingService:
    """Transient per-chat state shared by every API worker.

    Both keys expire on their own so a crashed send can never leave a chat
    stuck in the typing or locked state.
    """

    def __init__(self, redis_client: redis.Redis, ttl_seconds: int) -> None:  # type: ignore[type-arg]
        self._redis = redis_client
        self._ttl = ttl_seconds

    # --- Typing flag ---

    async def start_typing(self, chat_id: str) -> None:
        """Mark an agent reply as pending."""
        await self._redis.setex(f"{TYPING_PREFIX}{chat_id}", self._ttl, "1")

    async def stop_typing(self, chat_id: str) -> None:
        """Clear the pending-reply mark."""
        await self._redis.delete(f"{TYPING_PREFIX}{chat_id}")

    async def is_typing(self, chat_id: str) -> bool:
        """Check whether an agent reply is pending."""
        return await self._redis.get(f"{TYPING_PREFIX}{chat_id}") is not None

    # --- Send lock (one send in flight per chat) ---

    async def acquire_send_lock(self, chat_id: str) -> bool:
        """Try to take the chat's send lock."""
        key = f"{SEND_LOCK_PREFIX}{chat_id}"
        return bool(await self._redis.set(key, "1", ex=self._ttl, nx=True))

    async def release_send_lock(self, chat_id: str) -> None:
        """Release the chat's send lock."""
        await self._redis.delete(f"{SEND_LOCK_PREFIX}{chat_id}")
