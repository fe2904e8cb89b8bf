"""Agent settings API router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from agentchat.dependencies import get_agent_service
from agentchat.schemas.agent_schema import AgentListResponse, AgentRequest
from agentchat.schemas.response_schema import ApiResponse, success_response
from agentchat.services.agent_service import AgentService

router = APIRouter(prefix="/api/v1/agents", tags=["agents"])

AgentServiceDep = Annotated[AgentService, Depends(get_agent_service)]


@router.get("", response_model=ApiResponse[AgentListResponse])
async def list_agents(service: AgentServiceDep) -> dict:
    """List the current user's agents."""
    return success_response(await service.list_agents())


@router.post("", response_model=ApiResponse[AgentListResponse], status_code=201)
async def create_agent(request: AgentRequest, service: AgentServiceDep) -> dict:
    """Create an agent."""
    result = await service.create_agent(request)
    return success_response(result, status=201, message="Agent created")


@router.patch("/{agent_id}", response_model=ApiResponse[AgentListResponse])
async def update_agent(
    agent_id: str, request: AgentRequest, service: AgentServiceDep
) -> dict:
    """Rename an agent or change its webhook URL."""
    result = await service.update_agent(agent_id, request)
    return success_response(result, message="Agent updated")


@router.delete("/{agent_id}", response_model=ApiResponse[AgentListResponse])
async def delete_agent(agent_id: str, service: AgentServiceDep) -> dict:
    """Delete an agent. Chats bound to it are kept and unbound."""
    result = await service.delete_agent(agent_id)
    return success_response(result, message="Agent deleted")
