"""Application configuration using Pydantic Settings V2."""

from functools import cached_property
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from agentchat.core.settings import (
    AppConfig,
    AuthConfig,
    DatabaseConfig,
    RedisConfig,
    RelayConfig,
    ServerConfig,
)
from agentchat.core.settings.relay_config import RELAY_PATH


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.relay.url).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(
        default="agent-chat",
        description="Application name",
    )
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=True,
        description="Debug mode",
    )
    cors_origins: list[str] = Field(
        default_factory=list,
        description="Allowed browser origins as a JSON list; empty uses the env default",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=8004,
        ge=1,
        le=65535,
        description="Server port",
    )

    # JWT Auth
    jwt_secret_key: SecretStr = Field(
        description="JWT secret key for token signing",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm",
    )
    jwt_access_token_expire_minutes: int = Field(
        default=30,
        ge=1,
        le=1440,
        description="Access token expiration in minutes",
    )
    jwt_refresh_token_expire_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Refresh token expiration in days",
    )
    login_rate_limit: str = Field(
        default="5/minute",
        description="Login endpoint rate limit",
    )
    register_rate_limit: str = Field(
        default="3/minute",
        description="Register endpoint rate limit",
    )
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=16,
        description="bcrypt cost factor for password hashes",
    )

    # Database
    database_url: SecretStr = Field(
        description="Async database URL (mysql+aiomysql://... or sqlite+aiosqlite://...)",
    )

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    redis_socket_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="Timeout for connecting to and talking with Redis",
    )

    # Relay / webhook client
    relay_url: str | None = Field(
        default=None,
        description="URL the webhook client uses to reach the relay endpoint; "
        "defaults to this server's own relay route",
    )
    webhook_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Deadline for one agent call made through the relay",
    )
    relay_upstream_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for the relay's own call to the agent webhook",
    )
    agent_reply_field: str = Field(
        default="output",
        min_length=1,
        description="Field of the agent response holding the reply text",
    )

    # --- Domain properties ---

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            env=self.app_env,
            debug=self.debug,
            cors_origins=tuple(self.cors_origins),
        )

    @cached_property
    def server(self) -> ServerConfig:
        """Server configuration."""
        return ServerConfig(
            host=self.host,
            port=self.port,
        )

    @cached_property
    def auth(self) -> AuthConfig:
        """JWT authentication configuration."""
        return AuthConfig(
            secret_key=self.jwt_secret_key,
            algorithm=self.jwt_algorithm,
            access_token_expire_minutes=self.jwt_access_token_expire_minutes,
            refresh_token_expire_days=self.jwt_refresh_token_expire_days,
            login_rate_limit=self.login_rate_limit,
            register_rate_limit=self.register_rate_limit,
            bcrypt_rounds=self.bcrypt_rounds,
        )

    @cached_property
    def database(self) -> DatabaseConfig:
        """Database connection configuration."""
        return DatabaseConfig(url=self.database_url)

    @cached_property
    def redis(self) -> RedisConfig:
        """Redis connection configuration."""
        return RedisConfig(
            url=self.redis_url,
            socket_timeout_seconds=self.redis_socket_timeout_seconds,
        )

    @cached_property
    def relay(self) -> RelayConfig:
        """Relay endpoint and webhook client configuration."""
        return RelayConfig(
            url=self.relay_url or f"{self.server.local_url}{RELAY_PATH}",
            webhook_timeout_seconds=self.webhook_timeout_seconds,
            upstream_timeout_seconds=self.relay_upstream_timeout_seconds,
            reply_field=self.agent_reply_field,
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app.is_development


# Global settings instance
settings = Settings()
