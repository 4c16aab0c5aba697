from __future__ import annotations

import httpx

from hotspot_gate.config import Settings

USER_AGENT = "hotspot-gate/1.0"

# Upstream playlists and segments are fetched by a handful of set-top boxes at once.
_POOL_LIMITS = httpx.Limits(max_connections=20, max_keepalive_connections=10)


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Outbound client for the passthrough proxy.

    Connect retries are left to the proxy's own backoff so a failing upstream
    is attempted ``MAX_RETRIES`` times in total, not squared.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.REQUEST_TIMEOUT, connect=min(10, settings.REQUEST_TIMEOUT)),
        limits=_POOL_LIMITS,
        verify=settings.VERIFY_SSL,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    )


async def close_http_client(client: httpx.AsyncClient) -> None:
    if not client.is_closed:
        await client.aclose()
