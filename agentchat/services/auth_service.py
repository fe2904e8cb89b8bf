"""Sign-up, sign-in, sign-out and token refresh."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from agentchat.core.config import settings
from agentchat.core.exceptions import (
    AppException,
    AuthenticationError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenBlacklistedError,
    UserAlreadyExistsError,
)
from agentchat.core.security import DUMMY_HASH, hash_password, verify_password
from agentchat.repositories.user_repo import UserRepository
from agentchat.schemas.auth_schema import (
    LoginRequest,
    LogoutRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    TokenPayload,
    TokenResponse,
    UserResponse,
)
from agentchat.services.token_service import TokenService

logger = structlog.get_logger()


class AuthService:
    """Orchestrates registration, login, logout, and token refresh."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_service: TokenService,
        session: AsyncSession,
    ) -> None:
        self._user_repo = user_repo
        self._token_service = token_service
        self._session = session

    async def register(self, request: RegisterRequest) -> RegisterResponse:
        """Create an account and sign it in."""
        if await self._user_repo.exists_by_email(request.email):
            raise UserAlreadyExistsError

        hashed = await hash_password(request.password)
        user = await self._user_repo.create(email=request.email, hashed_password=hashed)
        await self._session.commit()

        logger.info("User registered", user_id=user.id)
        return RegisterResponse(
            user=UserResponse.model_validate(user),
            tokens=self._issue_tokens(user.id, user.email),
        )

    async def login(self, request: LoginRequest) -> TokenResponse:
        """Check credentials and issue a token pair."""
        user = await self._user_repo.find_by_email(request.email)

        if user is None:
            await verify_password(request.password, DUMMY_HASH)
            raise InvalidCredentialsError

        if not await verify_password(request.password, user.hashed_password):
            raise InvalidCredentialsError

        if not user.is_active:
            raise AuthenticationError(message="Account is disabled")

        logger.info("User logged in", user_id=user.id)
        return self._issue_tokens(user.id, user.email)

    async def logout(
        self, access_payload: TokenPayload, request: LogoutRequest
    ) -> MessageResponse:
        """Revoke the access token and, if given, the refresh token."""
        await self._token_service.blacklist_token(
            access_payload.jti, access_payload.exp
        )

        if request.refresh_token:
            try:
                refresh_payload = self._token_service.decode_token(
                    request.refresh_token
                )
            except AppException:
                logger.info("Ignoring unusable refresh token on logout")
            else:
                if refresh_payload.type == "refresh":
                    await self._token_service.blacklist_token(
                        refresh_payload.jti, refresh_payload.exp
                    )

        logger.info("User logged out", user_id=access_payload.sub)
        return MessageResponse(message="Successfully logged out")

    async def refresh(self, request: RefreshRequest) -> TokenResponse:
        """Rotate a refresh token into a new token pair."""
        payload = self._token_service.decode_token(request.refresh_token)

        if payload.type != "refresh":
            raise InvalidTokenError

        if await self._token_service.is_blacklisted(payload.jti):
            raise TokenBlacklistedError

        await self._token_service.blacklist_token(payload.jti, payload.exp)

        user = await self._user_repo.find_by_id(payload.sub)
        if user is None or not user.is_active:
            raise AuthenticationError(message="Account is disabled")

        return self._issue_tokens(user.id, user.email)

    def _issue_tokens(self, user_id: str, email: str) -> TokenResponse:
        return TokenResponse(
            access_token=self._token_service.create_access_token(user_id, email),
            refresh_token=self._token_service.create_refresh_token(user_id, email),
            expires_in=settings.auth.access_token_ttl_seconds,
        )
