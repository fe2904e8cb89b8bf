"""Same-origin relay that forwards a JSON payload to an external webhook."""

import json
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

logger = structlog.get_logger()

MISSING_FIELDS_ERROR = "Missing webhook URL or payload"


@dataclass(frozen=True)
class RelayResult:
    """Status code and JSON body to hand back to the caller."""

    status_code: int
    body: Any


class RelayService:
    """Stateless tunnel: POST ``payload`` to ``webhook_url``, return the answer.

    ``relay`` never raises. Every outcome, including unexpected failures, is
    turned into a :class:`RelayResult`:

    * 400 when ``webhook_url`` is missing or ``payload`` is not a JSON object,
    * the upstream status when the webhook answers outside 2xx,
    * 200 with the upstream JSON body, unchanged, on success,
    * 500 for anything else (bad request body, network error, non-JSON reply).
    """

    def __init__(self, http_client: httpx.AsyncClient, timeout_seconds: float) -> None:
        self._http = http_client
        self._timeout = timeout_seconds

    async def relay(self, raw_body: bytes) -> RelayResult:
        """Parse a raw relay request body and forward it."""
        try:
            request = json.loads(raw_body)
            if not isinstance(request, dict):
                return self._missing_fields()
            return await self.forward(request.get("webhook_url"), request.get("payload"))
        except Exception as exc:
            logger.exception("Relay failed")
            return RelayResult(500, {"error": f"Internal server error: {exc}"})

    async def forward(self, webhook_url: Any, payload: Any) -> RelayResult:
        """Forward an already-decoded payload to the webhook."""
        if not webhook_url or not isinstance(payload, dict):
            return self._missing_fields()

        logger.info("Relaying payload", webhook_url=webhook_url)
        try:
            response = await self._http.post(
                webhook_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
                follow_redirects=True,
            )

            if not response.is_success:
                logger.warning(
                    "Webhook returned error status",
                    webhook_url=webhook_url,
                    status_code=response.status_code,
                    body=response.text,
                )
                return RelayResult(
                    response.status_code,
                    {"error": f"Webhook failed: {response.status_code} {response.text}"},
                )

            data = response.json()
        except Exception as exc:
            logger.exception("Relay failed", webhook_url=webhook_url)
            return RelayResult(500, {"error": f"Internal server error: {exc}"})

        logger.info("Webhook responded", webhook_url=webhook_url)
        return RelayResult(200, data)

    @staticmethod
    def _missing_fields() -> RelayResult:
        return RelayResult(400, {"error": MISSING_FIELDS_ERROR})
