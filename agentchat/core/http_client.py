"""Shared outbound HTTP client lifecycle management."""

import httpx

http_client: httpx.AsyncClient | None = None


async def init_http_client() -> httpx.AsyncClient:
    """Create the pooled client used for relay and webhook calls.

    Per-call deadlines are applied by the callers, so the client itself
    carries no default timeout.
    """
    global http_client  # noqa: PLW0603
    http_client = httpx.AsyncClient(
        timeout=None,
        headers={"User-Agent": "agent-chat/0.1.0"},
    )
    return http_client


async def close_http_client() -> None:
    """Close the shared HTTP client."""
    global http_client  # noqa: PLW0603
    if http_client:
        await http_client.aclose()
        http_client = None


def get_http_client() -> httpx.AsyncClient:
    """Get the active HTTP client."""
    if http_client is None:
        raise RuntimeError("HTTP client not initialized")
    return http_client
