"""Agent repository for database operations."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agentchat.core.database import utc_now
from agentchat.models.agent import Agent
from agentchat.models.chat import Chat


class AgentRepository:
    """Encapsulates agent queries, always scoped to an owner."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_owner(self, owner_id: str) -> list[Agent]:
        """All agents of a user, alphabetically."""
        result = await self._session.execute(
            select(Agent)
            .where(Agent.owner_id == owner_id)
            .order_by(Agent.name.asc(), Agent.id.asc())
        )
        return list(result.scalars().all())

    async def find_owned(self, agent_id: str, owner_id: str) -> Agent | None:
        """Find an agent only if it belongs to ``owner_id``."""
        result = await self._session.execute(
            select(Agent).where(Agent.id == agent_id, Agent.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def create(self, owner_id: str, name: str, webhook_url: str) -> Agent:
        """Create a new agent."""
        agent = Agent(owner_id=owner_id, name=name, webhook_url=webhook_url)
        self._session.add(agent)
        await self._session.flush()
        await self._session.refresh(agent)
        return agent

    async def update(self, agent: Agent, name: str, webhook_url: str) -> Agent:
        """Rename an agent and/or point it at a new webhook."""
        agent.name = name
        agent.webhook_url = webhook_url
        agent.updated_at = utc_now()
        await self._session.flush()
        return agent

    async def delete(self, agent: Agent) -> None:
        """Delete an agent, detaching every chat that referenced it."""
        await self._session.execute(
            update(Chat).where(Chat.agent_id == agent.id).values(agent_id=None)
        )
        await self._session.delete(agent)
        await self._session.flush()
