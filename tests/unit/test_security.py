"""Tests for password hashing."""

import pytest

from agentchat.core.config import settings
from agentchat.core.security import (
    BCRYPT_MAX_BYTES,
    DUMMY_HASH,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    """Hashing cost, salting and the 72-byte bcrypt input limit."""

    async def test_hash_uses_configured_cost(self) -> None:
        hashed = await hash_password("MyPassword123!")

        assert hashed.startswith(f"$2b${settings.auth.bcrypt_rounds:02d}$")
        assert await verify_password("MyPassword123!", hashed) is True

    async def test_salted_per_call(self) -> None:
        assert await hash_password("same") != await hash_password("same")

    @pytest.mark.parametrize("attempt", ["Wrong1!", "", "correct1!"])
    async def test_wrong_password_fails(self, attempt: str) -> None:
        hashed = await hash_password("Correct1!")
        assert await verify_password(attempt, hashed) is False

    async def test_long_password_is_accepted(self) -> None:
        password = "ü" * 128
        assert len(password.encode()) > BCRYPT_MAX_BYTES

        hashed = await hash_password(password)

        assert await verify_password(password, hashed) is True

    async def test_dummy_hash_matches_login_cost(self) -> None:
        cost = DUMMY_HASH.split("$")[2]
        assert int(cost) == settings.auth.bcrypt_rounds
        assert await verify_password("anything", DUMMY_HASH) is False
