"""Domain-specific configuration models."""

from agentchat.core.settings.app_config import AppConfig
from agentchat.core.settings.auth_config import AuthConfig
from agentchat.core.settings.database_config import DatabaseConfig
from agentchat.core.settings.redis_config import RedisConfig
from agentchat.core.settings.relay_config import RelayConfig
from agentchat.core.settings.server_config import ServerConfig

__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "RedisConfig",
    "RelayConfig",
    "ServerConfig",
]
