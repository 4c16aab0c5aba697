from __future__ import annotations

from fastapi import APIRouter, Depends

from hotspot_gate.api.deps import get_request_client_ip, get_token_validator
from hotspot_gate.schemas.requests import ValidateQuery
from hotspot_gate.schemas.responses import ValidateResponse
from hotspot_gate.services.validator import TokenValidator

router = APIRouter()


@router.get("/validate", response_model=ValidateResponse, response_model_exclude_none=True)
async def validate(
    query: ValidateQuery = Depends(),
    validator: TokenValidator = Depends(get_token_validator),
    client_ip: str = Depends(get_request_client_ip),
) -> ValidateResponse:
    return validator.validate(query, client_ip)
