"""Webhook relay configuration."""

from pydantic import BaseModel


# Route of the relay endpoint on this service.
RELAY_PATH = "/api/relay/webhook"


class RelayConfig(BaseModel, frozen=True):
    """Settings for the relay endpoint and the webhook client that calls it.

    ``url`` is where the webhook client reaches the relay. It defaults to
    ``RELAY_PATH`` on this same service, so outbound agent calls always go
    through the relay endpoint rather than straight to the agent.
    """

    url: str
    webhook_timeout_seconds: float
    upstream_timeout_seconds: float
    reply_field: str

    @property
    def send_lock_ttl_seconds(self) -> int:
        """Lock lifetime: the client deadline plus slack for persistence."""
        return int(self.webhook_timeout_seconds) + 30
