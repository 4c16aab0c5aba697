from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from hotspot_gate.api.deps import get_proxy_fetcher
from hotspot_gate.services.proxy_fetcher import CORS_HEADERS, ProxyFetcher

router = APIRouter()


@router.get("/proxy")
async def proxy(
    url: str | None = None,
    fetcher: ProxyFetcher = Depends(get_proxy_fetcher),
) -> Response:
    result = await fetcher.fetch(url)
    return Response(
        content=result.content,
        status_code=result.status_code,
        media_type=result.content_type,
        headers={**CORS_HEADERS, "Cache-Control": "no-store"},
    )


@router.options("/proxy")
async def proxy_preflight() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)
