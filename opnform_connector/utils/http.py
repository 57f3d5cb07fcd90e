"""
HTTP client factory for outbound OpnForm calls.
"""
from __future__ import annotations
import httpx


def create_http_client(
    timeout: float = 20.0,
    user_agent: str = "opnform-connector/0.1",
    **kwargs
) -> httpx.AsyncClient:
    """
    Create an async HTTP client with:
    - a request timeout (connect capped at 10s)
    - the connector user-agent
    - no transport-level retries; a failed request surfaces to the caller
    """
    headers = kwargs.pop("headers", {})
    headers.setdefault("User-Agent", user_agent)
    headers.setdefault("Accept", "application/json")

    timeout_config = httpx.Timeout(timeout, connect=min(timeout, 10.0))
    transport = httpx.AsyncHTTPTransport(retries=0)

    return httpx.AsyncClient(
        timeout=timeout_config,
        headers=headers,
        transport=transport,
        **kwargs
    )
