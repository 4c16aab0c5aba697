from __future__ import annotations

from functools import lru_cache
from typing import Callable

import httpx
from fastapi import Depends, Request

from hotspot_gate.config import Settings
from hotspot_gate.services.issuer import TokenIssuer
from hotspot_gate.services.network import get_client_ip
from hotspot_gate.services.proxy_fetcher import ProxyFetcher
from hotspot_gate.services.rate_limit import RateLimitStore, SlidingWindowRateLimiter
from hotspot_gate.services.tokens import now_ms
from hotspot_gate.services.validator import TokenValidator


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_clock() -> Callable[[], int]:
    return now_ms


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def build_rate_limiter(settings: Settings) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        max_keys=settings.RATE_LIMIT_MAX_KEYS,
        max_history=settings.RATE_LIMIT_MAX_REQUESTS + 1,
    )


def get_rate_limiter(request: Request) -> RateLimitStore:
    return request.app.state.rate_limiter


def get_token_issuer(
    settings: Settings = Depends(get_settings),
    rate_limiter: RateLimitStore = Depends(get_rate_limiter),
    clock: Callable[[], int] = Depends(get_clock),
) -> TokenIssuer:
    return TokenIssuer(settings=settings, rate_limiter=rate_limiter, clock=clock)


def get_token_validator(
    settings: Settings = Depends(get_settings),
    clock: Callable[[], int] = Depends(get_clock),
) -> TokenValidator:
    return TokenValidator(settings=settings, clock=clock)


def get_proxy_fetcher(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ProxyFetcher:
    return ProxyFetcher(client=client, settings=settings)


def get_request_client_ip(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> str:
    return get_client_ip(request, trust_forwarded=settings.TRUST_FORWARDED_FOR)
