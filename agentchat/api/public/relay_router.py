"""Unauthenticated endpoints reached by the webhook client and by agents.

Both answer with plain JSON (``{error}`` on failure) instead of the
``ApiResponse`` envelope.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from agentchat.dependencies import get_incoming_webhook_service, get_relay_service
from agentchat.services.incoming_webhook_service import IncomingWebhookService
from agentchat.services.relay_service import RelayService

router = APIRouter(prefix="/api", tags=["relay"])

RelayServiceDep = Annotated[RelayService, Depends(get_relay_service)]
IncomingServiceDep = Annotated[
    IncomingWebhookService, Depends(get_incoming_webhook_service)
]


@router.post("/relay/webhook")
async def relay_webhook(request: Request, relay: RelayServiceDep) -> JSONResponse:
    """Forward ``payload`` to ``webhook_url`` and return the agent's JSON."""
    result = await relay.relay(await request.body())
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.post("/webhooks/incoming")
async def incoming_webhook(
    request: Request, service: IncomingServiceDep
) -> JSONResponse:
    """Let an agent push a message into a chat."""
    result = await service.handle(await request.body())
    return JSONResponse(status_code=result.status_code, content=result.body)
