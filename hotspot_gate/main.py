from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from hotspot_gate.api.deps import build_rate_limiter, get_settings
from hotspot_gate.api.router import api_router
from hotspot_gate.clients.http_client import close_http_client, create_http_client
from hotspot_gate.core.exceptions import HotspotGateError
from hotspot_gate.core.logging import setup_logging
from hotspot_gate.core.middleware import hotspot_exception_handler, unhandled_exception_handler


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging(log_level=settings.LOG_LEVEL, debug=settings.DEBUG)
    app.state.settings = settings
    app.state.http_client = create_http_client(settings)
    app.state.rate_limiter = build_rate_limiter(settings)
    yield
    await close_http_client(app.state.http_client)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Hotspot Gate",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(HotspotGateError, hotspot_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(api_router)
    return app


app = create_app()
