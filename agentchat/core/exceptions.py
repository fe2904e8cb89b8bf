"""Application exception classes and handlers."""

import structlog
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from agentchat.schemas.response_schema import ErrorDetail, ErrorEnvelope

logger = structlog.get_logger()


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


# --- Validation (400) ---


class ValidationError(AppException):
    """User-correctable input error."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code="VALIDATION_ERROR", status_code=400)


# --- Authentication (401) ---


class AuthenticationError(AppException):
    """Base authentication error."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message=message, code="AUTHENTICATION_ERROR", status_code=401)


class TokenExpiredError(AppException):
    """Token has expired."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has expired",
            code="TOKEN_EXPIRED",
            status_code=401,
        )


class TokenBlacklistedError(AppException):
    """Token has been revoked."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has been revoked",
            code="TOKEN_BLACKLISTED",
            status_code=401,
        )


class InvalidTokenError(AppException):
    """Token is invalid."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid token",
            code="INVALID_TOKEN",
            status_code=401,
        )


class InvalidCredentialsError(AppException):
    """Invalid email or password."""

    def __init__(self) -> None:
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


# --- Authorization (403) ---


class AuthorizationError(AppException):
    """Insufficient permissions."""

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message=message, code="AUTHORIZATION_ERROR", status_code=403)


# --- Not Found (404) ---


class ChatNotFoundError(AppException):
    """Chat does not exist or belongs to another user."""

    def __init__(self) -> None:
        super().__init__(
            message="Chat not found",
            code="CHAT_NOT_FOUND",
            status_code=404,
        )


class AgentNotFoundError(AppException):
    """Agent does not exist or belongs to another user."""

    def __init__(self) -> None:
        super().__init__(
            message="Agent not found",
            code="AGENT_NOT_FOUND",
            status_code=404,
        )


# --- Conflict (409) ---


class UserAlreadyExistsError(AppException):
    """User with this email already exists."""

    def __init__(self) -> None:
        super().__init__(
            message="User with this email already exists",
            code="USER_ALREADY_EXISTS",
            status_code=409,
        )


class ChatBusyError(AppException):
    """Another message is still being sent in this chat."""

    def __init__(self) -> None:
        super().__init__(
            message="A message is already being sent in this chat",
            code="CHAT_BUSY",
            status_code=409,
        )


# --- Upstream (502/504) ---


class WebhookError(AppException):
    """The agent webhook could not be reached through the relay."""

    def __init__(
        self,
        message: str = "Could not reach the agent",
        code: str = "WEBHOOK_ERROR",
        status_code: int = 502,
    ) -> None:
        super().__init__(message=message, code=code, status_code=status_code)


class WebhookTimeoutError(WebhookError):
    """The relay did not answer before the client deadline."""

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            message=f"Request to agent timed out after {timeout_seconds:g}s",
            code="WEBHOOK_TIMEOUT",
            status_code=504,
        )


class WebhookHTTPError(WebhookError):
    """The relay answered with a non-success status."""

    def __init__(self, status_code: int, status_text: str, body: str) -> None:
        self.upstream_status = status_code
        self.status_text = status_text
        self.body = body
        super().__init__(
            message=(
                f"HTTP error! status: {status_code}, "
                f"statusText: {status_text}, errorText: {body}"
            ),
            code="WEBHOOK_HTTP_ERROR",
        )


# --- Persistence (503) ---


class PersistenceError(AppException):
    """The data store failed or is unreachable."""

    def __init__(self, message: str = "Data store is unavailable") -> None:
        super().__init__(message=message, code="PERSISTENCE_ERROR", status_code=503)


# --- Exception Handlers ---


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Central exception handler for AppException."""
    body = ErrorEnvelope(error=ErrorDetail(code=exc.code, message=exc.message))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def persistence_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Render store failures as a store-wide error the UI can display."""
    logger.exception("Persistence failure", path=request.url.path)
    return await app_exception_handler(request, PersistenceError())


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures with the unified error shape."""
    return JSONResponse(
        status_code=422,
        content={
            "status": 422,
            "message": "Request validation failed",
            "code": "VALIDATION_ERROR",
            "errors": jsonable_encoder(exc.errors()),
        },
    )
