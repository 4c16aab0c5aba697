from __future__ import annotations

from fastapi import APIRouter

from hotspot_gate.api.routes import health, ip_check, issue, proxy, validate

api_router = APIRouter(prefix="/api")
api_router.include_router(health.router, tags=["health"])
api_router.include_router(issue.router, tags=["session"])
api_router.include_router(validate.router, tags=["session"])
api_router.include_router(proxy.router, tags=["proxy"])
api_router.include_router(ip_check.router, tags=["network"])
