"""Global dependencies for the application."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from agentchat.core.config import settings
from agentchat.core.database import get_async_session
from agentchat.core.exceptions import AuthenticationError
from agentchat.core.http_client import get_http_client
from agentchat.core.redis import get_redis
from agentchat.repositories.agent_repo import AgentRepository
from agentchat.repositories.chat_repo import ChatRepository
from agentchat.repositories.user_repo import UserRepository
from agentchat.schemas.auth_schema import CurrentUser
from agentchat.services.agent_service import AgentService
from agentchat.services.auth_service import AuthService
from agentchat.services.chat_service import ChatService
from agentchat.services.incoming_webhook_service import IncomingWebhookService
from agentchat.services.relay_service import RelayService
from agentchat.services.token_service import TokenService
from agentchat.services.typing_service import TypingService
from agentchat.services.webhook_client import WebhookClient

# --- Infrastructure ---


def get_token_service() -> TokenService:
    """Get TokenService backed by the active Redis client."""
    return TokenService(get_redis())


def get_typing_service() -> TypingService:
    """Get TypingService backed by the active Redis client."""
    return TypingService(get_redis(), ttl_seconds=settings.relay.send_lock_ttl_seconds)


def get_webhook_client() -> WebhookClient:
    """Get the client that reaches agents through the relay."""
    return WebhookClient(
        http_client=get_http_client(),
        relay_url=settings.relay.url,
        timeout_seconds=settings.relay.webhook_timeout_seconds,
    )


def get_relay_service() -> RelayService:
    """Get the relay bound to the shared HTTP client."""
    return RelayService(
        http_client=get_http_client(),
        timeout_seconds=settings.relay.upstream_timeout_seconds,
    )


# --- Repositories ---


def get_user_repository(
    session: AsyncSession = Depends(get_async_session),
) -> UserRepository:
    """Get UserRepository bound to the current session."""
    return UserRepository(session)


def get_agent_repository(
    session: AsyncSession = Depends(get_async_session),
) -> AgentRepository:
    """Get AgentRepository bound to the current session."""
    return AgentRepository(session)


def get_chat_repository(
    session: AsyncSession = Depends(get_async_session),
) -> ChatRepository:
    """Get ChatRepository bound to the current session."""
    return ChatRepository(session)


# --- Auth ---


def get_current_user(request: Request) -> CurrentUser:
    """Extract the authenticated user from middleware-populated state."""
    state = getattr(request, "state", None)
    user_id = getattr(state, "user_id", None) if state else None
    if user_id is None:
        raise AuthenticationError(message="Not authenticated")
    return CurrentUser(id=state.user_id, email=state.email)


def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
    session: AsyncSession = Depends(get_async_session),
) -> AuthService:
    """Get AuthService with all dependencies."""
    return AuthService(
        user_repo=user_repo,
        token_service=token_service,
        session=session,
    )


# --- Services ---


def get_agent_service(
    agent_repo: AgentRepository = Depends(get_agent_repository),
    session: AsyncSession = Depends(get_async_session),
    current_user: CurrentUser = Depends(get_current_user),
) -> AgentService:
    """Get AgentService for the authenticated user."""
    return AgentService(session=session, agent_repo=agent_repo, user_id=current_user.id)


def get_chat_service(
    chat_repo: ChatRepository = Depends(get_chat_repository),
    agent_repo: AgentRepository = Depends(get_agent_repository),
    session: AsyncSession = Depends(get_async_session),
    webhook_client: WebhookClient = Depends(get_webhook_client),
    typing_service: TypingService = Depends(get_typing_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> ChatService:
    """Get a ChatService context for the authenticated user."""
    return ChatService(
        session=session,
        chat_repo=chat_repo,
        agent_repo=agent_repo,
        webhook_client=webhook_client,
        typing_service=typing_service,
        user=current_user,
        reply_field=settings.relay.reply_field,
    )


def get_incoming_webhook_service(
    chat_repo: ChatRepository = Depends(get_chat_repository),
    session: AsyncSession = Depends(get_async_session),
) -> IncomingWebhookService:
    """Get the handler for agent-initiated messages."""
    return IncomingWebhookService(session=session, chat_repo=chat_repo)
