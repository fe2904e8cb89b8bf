"""Redis connection configuration."""

from urllib.parse import urlsplit

from pydantic import BaseModel


class RedisConfig(BaseModel, frozen=True):
    """Redis settings for the typing flags, send locks and token blacklist."""

    url: str
    socket_timeout_seconds: float = 5.0

    @property
    def display_url(self) -> str:
        """The URL with any password masked, for logs."""
        parts = urlsplit(self.url)
        if parts.password is None:
            return self.url
        netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
        return parts._replace(netloc=netloc).geturl()
