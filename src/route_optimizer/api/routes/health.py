"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.routing.geoapify_client import GeoapifyClient, get_geoapify_client

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/geoapify", status_code=status.HTTP_200_OK)
async def health_geoapify(client: GeoapifyClient = Depends(get_geoapify_client)) -> dict:
    """Check routing provider configuration and reachability."""
    healthy = await client.check_health()
    return {"service": "geoapify", "configured": client.configured, "healthy": healthy}
