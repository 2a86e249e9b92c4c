from __future__ import annotations

import httpx

from cepfinder.core.config import Settings


def build_async_client(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the process-wide ``httpx.AsyncClient`` used by every provider.

    The client is configured once and only read afterwards, so concurrent
    lookups share its connection pool without locking.
    """

    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.provider_timeout),
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        follow_redirects=True,
        transport=transport,
    )
