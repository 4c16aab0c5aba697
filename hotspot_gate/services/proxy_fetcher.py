from __future__ import annotations

import httpx
from pydantic import BaseModel

from hotspot_gate.config import Settings
from hotspot_gate.core.exceptions import ProxyFetchError, ProxyRequestError
from hotspot_gate.core.logging import get_logger
from hotspot_gate.utils.retry import with_retry

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class ProxiedResponse(BaseModel):
    content: bytes
    content_type: str
    status_code: int


class ProxyFetcher:
    """Fetches a remote URL server-side so the player can bypass CORS.

    Pure passthrough: body and content type are forwarded, nothing is
    rewritten. Transport failures are retried, HTTP error statuses are not.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    async def fetch(self, url: str | None) -> ProxiedResponse:
        target = self._parse_target(url)
        max_bytes = self._settings.PROXY_MAX_MB * 1024 * 1024
        download = with_retry(
            max_retries=self._settings.MAX_RETRIES,
            backoff_factor=self._settings.BACKOFF_FACTOR,
        )(self._download)

        try:
            return await download(target, max_bytes)
        except ProxyFetchError:
            raise
        except httpx.HTTPError as exc:
            logger.warning("proxy_fetch_failed", url=str(target), error=str(exc))
            raise ProxyFetchError(
                reason="Failed to fetch target",
                detail=str(exc) or exc.__class__.__name__,
            ) from exc

    @staticmethod
    def _parse_target(url: str | None) -> httpx.URL:
        if not url:
            raise ProxyRequestError(reason="Missing ?url parameter")
        try:
            target = httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise ProxyRequestError(reason="Invalid url parameter", detail=str(exc)) from exc
        if target.scheme not in ("http", "https") or not target.host:
            raise ProxyRequestError(
                reason="Invalid url parameter",
                detail=f"unsupported url: {url}",
            )
        return target

    async def _download(self, url: httpx.URL, max_bytes: int) -> ProxiedResponse:
        async with self._client.stream("GET", url) as resp:
            content_length = resp.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > max_bytes:
                raise ProxyFetchError(
                    reason="Failed to fetch target",
                    detail=f"response too large ({content_length} bytes)",
                )

            chunks: list[bytes] = []
            total = 0
            async for chunk in resp.aiter_bytes(chunk_size=64 * 1024):
                total += len(chunk)
                if total > max_bytes:
                    raise ProxyFetchError(
                        reason="Failed to fetch target",
                        detail=f"response too large ({total} bytes)",
                    )
                chunks.append(chunk)

            content_type = resp.headers.get("content-type") or DEFAULT_CONTENT_TYPE
            status_code = resp.status_code

        logger.info("proxy_fetched", url=str(url), status=status_code, size_bytes=total)
        return ProxiedResponse(
            content=b"".join(chunks),
            content_type=content_type,
            status_code=status_code,
        )
