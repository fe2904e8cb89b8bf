"""Response envelopes shared by every JSON API route."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Successful API response wrapping ``data``."""

    status: int = 200
    message: str = "Success"
    data: T | None = None


class ErrorDetail(BaseModel):
    """Machine-readable code plus a message the UI can show as-is."""

    code: str
    message: str


class ErrorEnvelope(BaseModel):
    """Body returned for any ``AppException``."""

    success: bool = False
    error: ErrorDetail


class AuthErrorResponse(BaseModel):
    """Body written by the auth middleware before routing."""

    status: int
    message: str
    code: str


def success_response(data: T, status: int = 200, message: str = "Success") -> dict:
    """Build the success envelope returned from route handlers."""
    return {"status": status, "message": message, "data": data}
