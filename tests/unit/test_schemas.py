"""Tests for request/response schemas."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from agentchat.schemas.agent_schema import AgentRequest
from agentchat.schemas.auth_schema import LoginRequest, RegisterRequest
from agentchat.schemas.chat_schema import SendMessageRequest, SetChatAgentRequest
from agentchat.schemas.webhook_schema import RelayRequest, WebhookEnvelope


class TestAgentRequest:
    """Agent name and webhook URL validation."""

    def test_values_are_stripped(self) -> None:
        req = AgentRequest(name="  Helper ", webhook_url=" https://a.test/hook ")
        assert req.name == "Helper"
        assert req.webhook_url == "https://a.test/hook"

    @pytest.mark.parametrize(
        ("name", "url"),
        [
            ("", "https://a.test/hook"),
            ("   ", "https://a.test/hook"),
            ("Helper", ""),
            ("Helper", "   "),
            ("Helper", "ftp://a.test/hook"),
            ("Helper", "a.test/hook"),
        ],
    )
    def test_invalid(self, name: str, url: str) -> None:
        with pytest.raises(ValidationError):
            AgentRequest(name=name, webhook_url=url)

    def test_http_allowed(self) -> None:
        req = AgentRequest(name="Local", webhook_url="HTTP://localhost:5678/hook")
        assert req.webhook_url == "HTTP://localhost:5678/hook"


class TestAuthSchemas:
    """Email normalization and password rules."""

    def test_email_lowercased(self) -> None:
        req = RegisterRequest(email="User@Example.COM", password="secret1")
        assert req.email == "user@example.com"
        assert LoginRequest(email="A@B.com", password="x").email == "a@b.com"

    def test_short_password(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@b.com", password="12345")

    def test_invalid_email(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(email="not-an-email", password="secret1")


class TestChatSchemas:
    """Message content bounds."""

    def test_empty_content_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SendMessageRequest(content="")

    def test_whitespace_content_kept(self) -> None:
        assert SendMessageRequest(content="  hi  ").content == "  hi  "

    def test_agent_id_optional(self) -> None:
        assert SetChatAgentRequest().agent_id is None


class TestWebhookSchemas:
    """Wire shape of the relay request."""

    def test_relay_request_dump(self) -> None:
        envelope = WebhookEnvelope(
            message="hi",
            chat_id="c-1",
            user_id="u-1",
            session_id="c-1",
            timestamp=datetime(2026, 5, 1, 9, 30, tzinfo=UTC),
        )
        body = RelayRequest(
            webhook_url="https://a.test/hook", payload=envelope
        ).model_dump(mode="json", exclude_none=True)

        assert body == {
            "webhook_url": "https://a.test/hook",
            "payload": {
                "message": "hi",
                "chat_id": "c-1",
                "user_id": "u-1",
                "session_id": "c-1",
                "timestamp": "2026-05-01T09:30:00Z",
            },
        }
