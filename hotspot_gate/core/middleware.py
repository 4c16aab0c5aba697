from __future__ import annotations

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from hotspot_gate.config import Settings
from hotspot_gate.core.error_pages import render_error_page
from hotspot_gate.core.exceptions import HotspotGateError
from hotspot_gate.core.logging import get_logger
from hotspot_gate.schemas.enums import ErrorCode
from hotspot_gate.schemas.responses import ErrorResponse

logger = get_logger(__name__)

_DEFAULT_PORTAL_URL: str = Settings.model_fields["PORTAL_URL"].default


def prefers_html(request: Request) -> bool:
    """True for browser navigations, false for fetch/XHR and API callers."""
    accept = request.headers.get("accept", "")
    return "text/html" in accept and "application/json" not in accept


def _portal_url(request: Request) -> str:
    settings = getattr(request.app.state, "settings", None)
    return settings.PORTAL_URL if settings is not None else _DEFAULT_PORTAL_URL


async def hotspot_exception_handler(request: Request, exc: HotspotGateError) -> Response:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "hotspot_error",
        error_code=exc.error_code,
        reason=exc.reason,
        detail=exc.detail,
        path=request.url.path,
    )
    if prefers_html(request):
        page = render_error_page(
            title=exc.title,
            message=exc.reason,
            portal_url=_portal_url(request),
            show_retry=exc.retryable,
            debug=exc.detail,
        )
        return HTMLResponse(page, status_code=exc.status_code)

    body = ErrorResponse(
        reason=exc.reason,
        error_code=ErrorCode(exc.error_code),
        detail=exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    logger.error("unhandled_error", path=request.url.path, exc_info=exc)
    body = ErrorResponse(reason="Internal server error", error_code=ErrorCode.INTERNAL_ERROR)
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))
