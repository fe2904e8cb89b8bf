"""Webhook envelope and relay wire schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class WebhookSender(BaseModel):
    """Identity of the user who wrote the message."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str


class WebhookEnvelope(BaseModel):
    """Payload delivered to an agent webhook."""

    model_config = ConfigDict(frozen=True)

    message: str
    chat_id: str
    user_id: str
    session_id: str
    timestamp: datetime
    sender: WebhookSender | None = None


class RelayRequest(BaseModel):
    """Body the webhook client posts to the relay."""

    webhook_url: str
    payload: WebhookEnvelope
