"""Factories for the shared HTTPX client used by geocoding lookups."""
from __future__ import annotations

import contextlib
from typing import AsyncIterator, Optional

import httpx


def build_http_client(
    *,
    user_agent: str,
    max_connections: int = 10,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return an `httpx.AsyncClient` that identifies itself with `user_agent`."""
    headers = {"User-Agent": user_agent}
    limits = httpx.Limits(max_connections=max_connections, max_keepalive_connections=max_connections)
    return httpx.AsyncClient(headers=headers, limits=limits, transport=transport)


@contextlib.asynccontextmanager
async def create_http_session(
    *,
    user_agent: str,
    max_connections: int = 10,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield a configured client for the duration of the context."""
    async with build_http_client(
        user_agent=user_agent,
        max_connections=max_connections,
        transport=transport,
    ) as client:
        yield client
