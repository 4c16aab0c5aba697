from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from hotspot_gate.api.deps import get_request_client_ip, get_settings, get_token_issuer
from hotspot_gate.config import Settings
from hotspot_gate.schemas.enums import BindingMode
from hotspot_gate.services.issuer import TokenIssuer

router = APIRouter()

# Methods no binding mode accepts; routed here so they get the JSON/HTML 405.
_REJECTED_METHODS = ["HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"]


@router.post("/issue", response_model=None, operation_id="issue_token")
async def issue_token(
    request: Request,
    settings: Settings = Depends(get_settings),
    issuer: TokenIssuer = Depends(get_token_issuer),
    client_ip: str = Depends(get_request_client_ip),
) -> Response:
    """Sign a session token for a portal login (identity-and-IP mode)."""
    return await _handle_issue(request, settings, issuer, client_ip)


@router.get("/issue", response_model=None, operation_id="issue_access_key")
async def issue_access_key(
    request: Request,
    settings: Settings = Depends(get_settings),
    issuer: TokenIssuer = Depends(get_token_issuer),
    client_ip: str = Depends(get_request_client_ip),
) -> Response:
    """Pass a shared access key through to the app (key-only mode)."""
    return await _handle_issue(request, settings, issuer, client_ip)


@router.api_route("/issue", methods=_REJECTED_METHODS, response_model=None, include_in_schema=False)
async def issue_rejected_method(
    request: Request,
    settings: Settings = Depends(get_settings),
    issuer: TokenIssuer = Depends(get_token_issuer),
    client_ip: str = Depends(get_request_client_ip),
) -> Response:
    return await _handle_issue(request, settings, issuer, client_ip)


async def _handle_issue(
    request: Request,
    settings: Settings,
    issuer: TokenIssuer,
    client_ip: str,
) -> Response:
    issuer.check_method(request.method)
    issuer.check_network(client_ip)
    issuer.check_rate_limit(client_ip)

    if issuer.mode is BindingMode.KEY_ONLY:
        key = request.query_params.get("key")
        issuer.check_access_key(key)
        return RedirectResponse(issuer.key_redirect_url(key), status_code=302)

    issuer.check_shared_secret(request.headers.get(settings.ISSUE_SECRET_HEADER))
    payload = await _read_payload(request)
    identity, validity_ms = issuer.parse_fields(payload, client_ip)
    issued = issuer.issue(identity=identity, client_ip=client_ip, validity_ms=validity_ms)

    if "application/json" in request.headers.get("accept", ""):
        return JSONResponse(issued.model_dump())
    return RedirectResponse(issued.redirect_url, status_code=302)


async def _read_payload(request: Request) -> dict[str, object]:
    """Merge query parameters with a JSON or form body; body fields win."""
    payload: dict[str, object] = dict(request.query_params)
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            payload.update(body)
    elif "form" in content_type:
        form = await request.form()
        payload.update({k: v for k, v in form.items() if isinstance(v, str)})
    return payload
