"""JWT authentication configuration."""

from pydantic import BaseModel, SecretStr


class AuthConfig(BaseModel, frozen=True):
    """JWT, password hashing and login throttling settings."""

    secret_key: SecretStr
    algorithm: str
    access_token_expire_minutes: int
    refresh_token_expire_days: int
    login_rate_limit: str
    register_rate_limit: str
    bcrypt_rounds: int = 12

    @property
    def access_token_ttl_seconds(self) -> int:
        return self.access_token_expire_minutes * 60
