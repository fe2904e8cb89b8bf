"""Create a user, optionally with a first agent.

Usage:
    python -m scripts.create_user --email me@test.com --password secret1 \
        --agent-name Support --agent-url https://hooks.example.com/support
"""

import argparse
import asyncio

from sqlalchemy import select

from agentchat.core.database import Base, async_session_factory, engine
from agentchat.core.security import hash_password
from agentchat.models.agent import Agent
from agentchat.models.user import User


async def create_user(
    email: str, password: str, agent_name: str | None, agent_url: str | None
) -> None:
    """Create the user if missing, then add the agent if one was given."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None:
            user = User(email=email, hashed_password=await hash_password(password))
            session.add(user)
            await session.flush()
            print(f"User created: {email} (id={user.id})")
        else:
            print(f"User with email '{email}' already exists (id={user.id}).")

        if agent_name and agent_url:
            agent = Agent(owner_id=user.id, name=agent_name, webhook_url=agent_url)
            session.add(agent)
            await session.flush()
            print(f"Agent created: {agent_name} -> {agent_url} (id={agent.id})")

        await session.commit()

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a user and optional agent")
    parser.add_argument("--email", required=True, help="User email")
    parser.add_argument("--password", required=True, help="User password")
    parser.add_argument("--agent-name", help="Name of an agent to create")
    parser.add_argument("--agent-url", help="Webhook URL of that agent")
    args = parser.parse_args()

    asyncio.run(create_user(args.email, args.password, args.agent_name, args.agent_url))


if __name__ == "__main__":
    main()
