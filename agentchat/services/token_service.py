"""JWT token creation, validation, and Redis-backed revocation."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Literal

import jwt
import redis.asyncio as redis

from agentchat.core.config import settings
from agentchat.core.exceptions import InvalidTokenError, TokenExpiredError
from agentchat.schemas.auth_schema import TokenPayload

BLACKLIST_PREFIX = "token_blacklist:"


class TokenService:
    """Issue and verify access/refresh tokens; revoke them on sign-out."""

    def __init__(self, redis_client: redis.Redis) -> None:  # type: ignore[type-arg]
        self._redis = redis_client
        self._secret = settings.auth.secret_key.get_secret_value()
        self._algorithm = settings.auth.algorithm

    def create_access_token(self, user_id: str, email: str) -> str:
        """Create a signed JWT access token."""
        ttl = timedelta(minutes=settings.auth.access_token_expire_minutes)
        return self._encode(user_id, email, "access", ttl)

    def create_refresh_token(self, user_id: str, email: str) -> str:
        """Create a signed JWT refresh token."""
        ttl = timedelta(days=settings.auth.refresh_token_expire_days)
        return self._encode(user_id, email, "refresh", ttl)

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a JWT token."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError from e

        try:
            return TokenPayload(
                sub=payload["sub"],
                email=payload["email"],
                type=payload["type"],
                jti=payload["jti"],
                exp=payload["exp"],
            )
        except KeyError as e:
            raise InvalidTokenError from e

    def _encode(
        self,
        user_id: str,
        email: str,
        token_type: Literal["access", "refresh"],
        ttl: timedelta,
    ) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": user_id,
            "email": email,
            "type": token_type,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    # --- Blacklist ---

    async def blacklist_token(self, jti: str, exp: int) -> None:
        """Revoke a token until it would have expired anyway."""
        ttl = exp - int(datetime.now(UTC).timestamp())
        if ttl > 0:
            await self._redis.setex(f"{BLACKLIST_PREFIX}{jti}", ttl, "1")

    async def is_blacklisted(self, jti: str) -> bool:
        """Check if a token is blacklisted."""
        return await self._redis.get(f"{BLACKLIST_PREFIX}{jti}") is not None
