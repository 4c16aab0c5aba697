from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from hotspot_gate.api.deps import get_request_client_ip, get_settings
from hotspot_gate.config import Settings
from hotspot_gate.schemas.responses import IPCheckResponse
from hotspot_gate.services.network import check_ip

router = APIRouter()


@router.get("/check-ip", response_model=IPCheckResponse)
async def check_client_ip(
    settings: Settings = Depends(get_settings),
    client_ip: str = Depends(get_request_client_ip),
) -> JSONResponse:
    result = check_ip(client_ip, settings.HOTSPOT_IP_START, settings.HOTSPOT_IP_END)
    return JSONResponse(
        status_code=200 if result.allowed else 403,
        content=result.model_dump(),
    )
