from __future__ import annotations

from fastapi import APIRouter, Depends

from hotspot_gate.api.deps import get_settings
from hotspot_gate.config import Settings
from hotspot_gate.core.logging import SERVICE_NAME
from hotspot_gate.schemas.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Liveness plus the issuance policy this deployment runs, for portal operators."""
    return HealthResponse(
        service=SERVICE_NAME,
        binding_mode=settings.BINDING_MODE,
        rate_limit_enabled=settings.RATE_LIMIT_ENABLED,
    )
