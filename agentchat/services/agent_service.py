"""Agent settings: create, list, update and delete a user's agents."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from agentchat.core.exceptions import AgentNotFoundError
from agentchat.models.agent import Agent
from agentchat.repositories.agent_repo import AgentRepository
from agentchat.schemas.agent_schema import (
    AgentListResponse,
    AgentRequest,
    AgentResponse,
)

logger = structlog.get_logger()


class AgentService:
    """Agent CRUD scoped to the authenticated owner."""

    def __init__(
        self, session: AsyncSession, agent_repo: AgentRepository, user_id: str
    ) -> None:
        self._session = session
        self._agent_repo = agent_repo
        self._user_id = user_id

    async def list_agents(self) -> AgentListResponse:
        """Return the user's agents sorted by name."""
        agents = await self._agent_repo.find_by_owner(self._user_id)
        return AgentListResponse(
            agents=[AgentResponse.model_validate(a) for a in agents]
        )

    async def create_agent(self, request: AgentRequest) -> AgentListResponse:
        """Create an agent and return the refreshed list."""
        agent = await self._agent_repo.create(
            owner_id=self._user_id,
            name=request.name,
            webhook_url=request.webhook_url,
        )
        await self._session.commit()
        logger.info("Agent created", agent_id=agent.id, user_id=self._user_id)
        return await self.list_agents()

    async def update_agent(
        self, agent_id: str, request: AgentRequest
    ) -> AgentListResponse:
        """Rename or re-point an agent and return the refreshed list."""
        agent = await self._get_owned(agent_id)
        await self._agent_repo.update(agent, request.name, request.webhook_url)
        await self._session.commit()
        logger.info("Agent updated", agent_id=agent.id)
        return await self.list_agents()

    async def delete_agent(self, agent_id: str) -> AgentListResponse:
        """Delete an agent; chats bound to it are kept but unbound."""
        agent = await self._get_owned(agent_id)
        await self._agent_repo.delete(agent)
        await self._session.commit()
        logger.info("Agent deleted", agent_id=agent_id)
        return await self.list_agents()

    async def _get_owned(self, agent_id: str) -> Agent:
        agent = await self._agent_repo.find_owned(agent_id, self._user_id)
        if agent is None:
            raise AgentNotFoundError
        return agent
