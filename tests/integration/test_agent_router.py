"""Integration tests for agent settings endpoints."""

from httpx import AsyncClient

from tests.conftest import seed_agent, seed_chat, seed_user


class TestAgentEndpoints:
    """CRUD on /api/v1/agents."""

    async def test_create_and_list(self, authed_client: AsyncClient) -> None:
        resp = await authed_client.post(
            "/api/v1/agents",
            json={"name": " Writer ", "webhook_url": "https://n8n.test/webhook/w"},
        )
        assert resp.status_code == 201
        agents = resp.json()["data"]["agents"]
        assert [(a["name"], a["webhook_url"]) for a in agents] == [
            ("Writer", "https://n8n.test/webhook/w")
        ]

        listed = await authed_client.get("/api/v1/agents")
        assert listed.json()["data"]["agents"] == agents

    async def test_create_invalid_url(self, authed_client: AsyncClient) -> None:
        resp = await authed_client.post(
            "/api/v1/agents", json={"name": "Bad", "webhook_url": "not-a-url"}
        )
        assert resp.status_code == 422

    async def test_update(self, authed_client: AsyncClient, user_id: str) -> None:
        agent_id = await seed_agent(user_id, "Old", "https://old.test")

        resp = await authed_client.patch(
            f"/api/v1/agents/{agent_id}",
            json={"name": "New", "webhook_url": "https://new.test"},
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["agents"][0]["name"] == "New"

    async def test_cannot_touch_foreign_agent(self, authed_client: AsyncClient) -> None:
        other_id = await seed_user("other@test.com")
        agent_id = await seed_agent(other_id, "Theirs", "https://t.test")

        resp = await authed_client.delete(f"/api/v1/agents/{agent_id}")

        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "AGENT_NOT_FOUND"

    async def test_delete_unbinds_chat(
        self, authed_client: AsyncClient, user_id: str
    ) -> None:
        agent_id = await seed_agent(user_id, "Bot", "https://bot.test")
        chat_id = await seed_chat(user_id, agent_id)

        resp = await authed_client.delete(f"/api/v1/agents/{agent_id}")
        assert resp.status_code == 200
        assert resp.json()["data"]["agents"] == []

        chat = await authed_client.get(f"/api/v1/chats/{chat_id}")
        assert chat.status_code == 200
        assert chat.json()["data"]["chat"]["agent_id"] is None
