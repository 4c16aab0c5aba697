from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from hotspot_gate.schemas.enums import BindingMode, ErrorCode


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "hotspot-gate"
    binding_mode: BindingMode
    rate_limit_enabled: bool


class IssueResponse(BaseModel):
    ok: Literal[True] = True
    token: str = Field(..., description="HMAC-SHA256 hex digest")
    ts: int = Field(..., description="Issue timestamp, ms since epoch")
    u: str = Field(..., description="Identity the token is bound to")
    exp: int = Field(..., description="Validity duration in ms")
    redirect_url: str


class ValidateResponse(BaseModel):
    """Successful validation. ``token``/``ts`` are present only when rotated."""

    ok: Literal[True] = True
    token: str | None = None
    ts: int | None = None


class IPCheckResponse(BaseModel):
    allowed: bool
    ip: str


class ErrorResponse(BaseModel):
    ok: Literal[False] = False
    reason: str
    error_code: ErrorCode
    detail: str | None = None
