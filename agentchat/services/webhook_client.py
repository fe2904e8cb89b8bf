"""Client that delivers chat messages to agent webhooks via the relay."""

import asyncio
import json
from datetime import UTC, datetime
from typing import Any

import httpx
import structlog

from agentchat.core.exceptions import (
    WebhookError,
    WebhookHTTPError,
    WebhookTimeoutError,
)
from agentchat.schemas.webhook_schema import (
    RelayRequest,
    WebhookEnvelope,
    WebhookSender,
)

logger = structlog.get_logger()

EMPTY_RESPONSE_TEXT = "Received empty response from agent"


def normalize_response(text: str) -> dict[str, Any]:
    """Turn a relay response body into a response object.

    JSON objects pass through; any other JSON value and any non-JSON text is
    wrapped under ``response``. A blank body yields a placeholder.
    """
    if not text or not text.strip():
        return {"response": EMPTY_RESPONSE_TEXT}
    try:
        data = json.loads(text)
    except ValueError:
        return {"response": text}
    if isinstance(data, dict):
        return data
    return {"response": data}


class WebhookClient:
    """Builds the webhook envelope and sends it through the relay endpoint.

    Agents are never called directly: the envelope is posted to the relay,
    which forwards it to ``webhook_url``. The whole round trip runs under a
    single deadline; when it expires the in-flight request is cancelled.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        relay_url: str,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._http = http_client
        self._relay_url = relay_url
        self._timeout = timeout_seconds

    @staticmethod
    def build_envelope(
        message: str,
        chat_id: str,
        user_id: str,
        user_email: str | None = None,
    ) -> WebhookEnvelope:
        """Assemble the payload an agent receives. The chat id doubles as session id."""
        return WebhookEnvelope(
            message=message,
            chat_id=chat_id,
            user_id=user_id,
            session_id=chat_id,
            timestamp=datetime.now(UTC),
            sender=WebhookSender(id=user_id, email=user_email) if user_email else None,
        )

    async def send_message(
        self,
        message: str,
        chat_id: str,
        user_id: str,
        webhook_url: str,
        user_email: str | None = None,
    ) -> dict[str, Any]:
        """Send a message to an agent and return its normalized response.

        Raises:
            WebhookTimeoutError: the relay did not answer within the deadline.
            WebhookHTTPError: the relay answered with a non-2xx status.
            WebhookError: any other transport failure.
        """
        envelope = self.build_envelope(message, chat_id, user_id, user_email)
        relay_request = RelayRequest(webhook_url=webhook_url, payload=envelope)
        logger.info("Sending message to agent", chat_id=chat_id, webhook_url=webhook_url)

        try:
            async with asyncio.timeout(self._timeout):
                response = await self._http.post(
                    self._relay_url,
                    json=relay_request.model_dump(mode="json", exclude_none=True),
                    headers={"Content-Type": "application/json"},
                )
                text = response.text
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.warning(
                "Agent request timed out",
                chat_id=chat_id,
                webhook_url=webhook_url,
                timeout_seconds=self._timeout,
            )
            raise WebhookTimeoutError(self._timeout) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "Agent request failed",
                chat_id=chat_id,
                webhook_url=webhook_url,
                error=str(exc),
            )
            raise WebhookError(message=str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            logger.warning(
                "Relay returned error status",
                chat_id=chat_id,
                status_code=response.status_code,
                body=text,
            )
            raise WebhookHTTPError(response.status_code, response.reason_phrase, text)

        logger.info("Agent responded", chat_id=chat_id, status_code=response.status_code)
        return normalize_response(text)
