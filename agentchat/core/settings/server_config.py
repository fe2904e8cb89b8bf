"""Server configuration."""

from pydantic import BaseModel

# Addresses that mean "every interface" and cannot be dialed back.
_WILDCARD_HOSTS = frozenset({"0.0.0.0", "::", ""})


class ServerConfig(BaseModel, frozen=True):
    """Bind address of this service."""

    host: str
    port: int

    @property
    def local_url(self) -> str:
        """Base URL at which this process can reach itself."""
        host = "127.0.0.1" if self.host in _WILDCARD_HOSTS else self.host
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self.port}"
