"""Authentication endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from agentchat.core.config import settings
from agentchat.core.rate_limit import limiter
from agentchat.dependencies import get_auth_service, get_current_user
from agentchat.schemas.auth_schema import (
    CurrentUser,
    LoginRequest,
    LogoutRequest,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    TokenPayload,
    TokenResponse,
)
from agentchat.schemas.response_schema import ApiResponse, success_response
from agentchat.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


@router.post(
    "/register",
    response_model=ApiResponse[RegisterResponse],
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.auth.register_rate_limit)
async def register(
    request: Request,
    body: RegisterRequest,
    auth_service: AuthServiceDep,
) -> dict:
    """Register a new user."""
    result = await auth_service.register(body)
    return success_response(result, status=201)


@router.post("/login", response_model=ApiResponse[TokenResponse])
@limiter.limit(settings.auth.login_rate_limit)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthServiceDep,
) -> dict:
    """Authenticate and receive tokens."""
    result = await auth_service.login(body)
    return success_response(result)


@router.post("/logout", response_model=ApiResponse[MessageResponse])
async def logout(
    request: Request,
    body: LogoutRequest,
    auth_service: AuthServiceDep,
    current_user: CurrentUserDep,
) -> dict:
    """Revoke the current access token."""
    access_payload = TokenPayload(
        sub=current_user.id,
        email=current_user.email,
        type="access",
        jti=request.state.jti,
        exp=request.state.exp,
    )
    result = await auth_service.logout(access_payload, body)
    return success_response(result)


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
async def refresh(
    body: RefreshRequest,
    auth_service: AuthServiceDep,
) -> dict:
    """Refresh an access token."""
    result = await auth_service.refresh(body)
    return success_response(result)


@router.get("/me", response_model=ApiResponse[CurrentUser])
async def me(current_user: CurrentUserDep) -> dict:
    """Return the signed-in user."""
    return success_response(current_user)
