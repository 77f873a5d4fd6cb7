"""Health endpoints."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, status

from ...config import settings
from ...services.routing.osrm_client import check_health

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/routing", status_code=status.HTTP_200_OK)
async def health_routing() -> dict:
    """Check every configured routing provider."""
    endpoints = list(settings.routing_endpoints)
    flags = await asyncio.gather(*(check_health(url) for url in endpoints), return_exceptions=True)
    providers = [
        {"endpoint": url, "healthy": flag is True, **({"error": str(flag)} if isinstance(flag, Exception) else {})}
        for url, flag in zip(endpoints, flags)
    ]
    return {"service": "routing", "healthy": any(p["healthy"] for p in providers), "providers": providers}
