"""Password hashing on a worker pool, so bcrypt never blocks the event loop."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import bcrypt

from agentchat.core.config import settings

# bcrypt only reads this many bytes; newer releases raise on longer input.
BCRYPT_MAX_BYTES = 72

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="bcrypt")


def _secret(password: str) -> bytes:
    return password.encode()[:BCRYPT_MAX_BYTES]


def _hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.auth.bcrypt_rounds)
    return bcrypt.hashpw(_secret(password), salt).decode()


# Checked against when the email is unknown so both login paths cost the same.
DUMMY_HASH = _hash("unknown-account")


async def hash_password(password: str) -> str:
    """Hash a password with the configured bcrypt cost."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, _hash, password)


async def verify_password(plain: str, hashed: str) -> bool:
    """Check a password against a stored hash."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        _executor,
        lambda: bcrypt.checkpw(_secret(plain), hashed.encode()),
    )
