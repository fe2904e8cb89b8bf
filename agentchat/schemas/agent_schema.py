"""Agent settings schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_required(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must not be empty")
    return value


class AgentRequest(BaseModel):
    """Create or update an agent."""

    name: str = Field(..., max_length=255)
    webhook_url: str = Field(..., max_length=2048)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v, "name")

    @field_validator("webhook_url")
    @classmethod
    def validate_webhook_url(cls, v: str) -> str:
        v = _strip_required(v, "webhook_url")
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("webhook_url must be an http(s) URL")
        return v


class AgentResponse(BaseModel):
    """Agent as returned to its owner."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    owner_id: str
    name: str
    webhook_url: str
    created_at: datetime
    updated_at: datetime


class AgentListResponse(BaseModel):
    """All agents of the current user, alphabetically."""

    model_config = ConfigDict(frozen=True)

    agents: list[AgentResponse]
