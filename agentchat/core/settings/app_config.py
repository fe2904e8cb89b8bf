"""Application environment configuration."""

from typing import Literal

from pydantic import BaseModel


class AppConfig(BaseModel, frozen=True):
    """Application environment settings."""

    name: str
    env: Literal["development", "staging", "production"]
    debug: bool
    cors_origins: tuple[str, ...] = ()

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def cors_allow_origins(self) -> list[str]:
        """Browser origins allowed to call the API.

        Development accepts any origin when none are listed. Elsewhere only
        the listed origins are allowed, which by default means same-origin
        only, matching the relay's same-origin deployment.
        """
        if self.cors_origins:
            return list(self.cors_origins)
        return ["*"] if self.is_development else []
