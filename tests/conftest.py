"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-bytes!")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402

import fakeredis.aioredis  # noqa: E402
import httpx  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from agentchat.core.database import Base  # noqa: E402
from agentchat.core.rate_limit import limiter  # noqa: E402
from agentchat.models.agent import Agent  # noqa: E402
from agentchat.models.chat import Chat  # noqa: E402
from agentchat.models.message import Message  # noqa: E402, F401
from agentchat.models.user import User  # noqa: E402
from agentchat.services.token_service import TokenService  # noqa: E402

RELAY_URL = "http://127.0.0.1:8004/api/relay/webhook"

# --- Test DB (SQLite in-memory) ---

test_engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    """Create all tables before each test, drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session."""
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@pytest.fixture(autouse=True)
def disable_rate_limits() -> None:
    """Keep slowapi from throttling repeated logins across tests."""
    limiter.enabled = False


# --- Test Redis (fakeredis) ---


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Create a fresh fake Redis client."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture(autouse=True)
def patch_redis(
    fake_redis: fakeredis.aioredis.FakeRedis, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Patch the global redis_client read by the middleware and get_redis()."""
    monkeypatch.setattr("agentchat.core.redis.redis_client", fake_redis)


# --- Outbound HTTP (relay + agent webhooks) ---

Handler = Callable[[httpx.Request], Awaitable[httpx.Response]]


class FakeAgents:
    """Stands in for the outside world reached by the shared HTTP client.

    Calls to the relay URL are served by the application itself, so the
    webhook client really goes through the relay endpoint. Every other URL is
    an agent webhook answered by a registered handler.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []
        self._app_transport: ASGITransport | None = None

    def add(self, url: str, handler: Handler) -> None:
        self.routes[url] = handler

    def add_json(self, url: str, body: object, status_code: int = 200) -> None:
        async def _respond(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=body)

        self.add(url, _respond)

    def bind_app(self, transport: ASGITransport) -> None:
        self._app_transport = transport

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == RELAY_URL and self._app_transport is not None:
            return await self._app_transport.handle_async_request(request)
        self.requests.append(request)
        handler = self.routes.get(str(request.url))
        if handler is None:
            raise httpx.ConnectError("Connection refused", request=request)
        return await handler(request)


@pytest.fixture
def fake_agents() -> FakeAgents:
    """Registry of fake agent webhooks."""
    return FakeAgents()


@pytest.fixture(autouse=True)
async def patch_http_client(
    fake_agents: FakeAgents, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Route the shared outbound client through FakeAgents."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_agents))
    monkeypatch.setattr("agentchat.core.http_client.http_client", client)
    yield client
    await client.aclose()


# --- Token helpers ---


@pytest.fixture
def token_service(fake_redis: fakeredis.aioredis.FakeRedis) -> TokenService:
    """Create a TokenService backed by fake Redis."""
    return TokenService(fake_redis)


def make_auth_headers(
    fake_redis: fakeredis.aioredis.FakeRedis,
    user_id: str = "user-1",
    email: str = "test@test.com",
) -> dict[str, str]:
    """Generate Authorization headers with a valid access token."""
    ts = TokenService(fake_redis)
    token = ts.create_access_token(user_id=user_id, email=email)
    return {"Authorization": f"Bearer {token}"}


# --- App override & client fixtures ---


def _get_app():  # type: ignore[no-untyped-def]
    """Import app lazily and apply overrides."""
    from agentchat.core.database import get_async_session as original_dep
    from agentchat.main import app

    app.dependency_overrides[original_dep] = override_get_async_session
    return app


@pytest.fixture
async def async_client(
    fake_redis: fakeredis.aioredis.FakeRedis,
    fake_agents: FakeAgents,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an unauthenticated async test client."""
    transport = ASGITransport(app=_get_app())
    fake_agents.bind_app(transport)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# --- Seed helpers ---


async def seed_user(email: str = "test@test.com", user_id: str | None = None) -> str:
    """Insert a user and return its id."""
    async with test_session_factory() as session:
        user = User(email=email, hashed_password="hashed")
        if user_id is not None:
            user.id = user_id
        session.add(user)
        await session.commit()
        return user.id


async def seed_agent(owner_id: str, name: str, webhook_url: str) -> str:
    """Insert an agent and return its id."""
    async with test_session_factory() as session:
        agent = Agent(owner_id=owner_id, name=name, webhook_url=webhook_url)
        session.add(agent)
        await session.commit()
        return agent.id


async def seed_chat(owner_id: str, agent_id: str | None = None) -> str:
    """Insert a chat and return its id."""
    async with test_session_factory() as session:
        chat = Chat(owner_id=owner_id, agent_id=agent_id)
        session.add(chat)
        await session.commit()
        return chat.id


@pytest.fixture
async def user_id() -> str:
    """A persisted user matching the default auth headers."""
    return await seed_user("test@test.com", user_id="user-1")


@pytest.fixture
async def authed_client(
    async_client: AsyncClient,
    fake_redis: fakeredis.aioredis.FakeRedis,
    user_id: str,
) -> AsyncClient:
    """The async client, signed in as the default user."""
    async_client.headers.update(make_auth_headers(fake_redis, user_id=user_id))
    return async_client


# --- DB session for tests ---


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a raw async session for repository tests."""
    async with test_session_factory() as session:
        yield session
