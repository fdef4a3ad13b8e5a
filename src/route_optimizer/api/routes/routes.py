"""Routing endpoints."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Union

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...schemas.routing import (
    AutocompleteResponse,
    FallbackRouteResponse,
    RouteOptimizeRequest,
    RouteOptimizeResponse,
)
from ...services.routing.errors import RoutingError
from ...services.routing.geoapify_client import GeoapifyClient, get_geoapify_client
from ...services.routing.service import calculate_route, optimize_route

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])

RouteResponse = Union[RouteOptimizeResponse, FallbackRouteResponse]


async def _run(action: str, call: Callable[[], Awaitable]):
    try:
        return await call()
    except RoutingError as exc:
        logger.info(f"Route {action} rejected ({exc.kind}): {exc.message}")
        raise HTTPException(status_code=exc.status_code, detail=exc.to_detail()) from exc
    except Exception as exc:
        logger.exception(f"Error during route {action}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"kind": "internal_error", "message": f"Route {action} failed."},
        ) from exc


@router.post("/optimize", response_model=RouteResponse, status_code=status.HTTP_200_OK)
async def optimize(
    payload: RouteOptimizeRequest,
    client: GeoapifyClient = Depends(get_geoapify_client),
) -> RouteResponse:
    """Reorder a day's activities by nearest neighbor and return the routed path."""
    return await _run("optimization", lambda: optimize_route(payload, client))


@router.post("/calculate", response_model=RouteResponse, status_code=status.HTTP_200_OK)
async def calculate(
    payload: RouteOptimizeRequest,
    client: GeoapifyClient = Depends(get_geoapify_client),
) -> RouteResponse:
    """Route the activities in the order given."""
    return await _run("calculation", lambda: calculate_route(payload, client))


@router.get("/autocomplete", response_model=AutocompleteResponse, status_code=status.HTTP_200_OK)
async def autocomplete(
    text: str = Query(..., min_length=1, description="Free-text place to search for"),
    limit: int = Query(default=3, ge=1, le=20),
    client: GeoapifyClient = Depends(get_geoapify_client),
) -> AutocompleteResponse:
    features = await _run("autocomplete", lambda: client.autocomplete(text, limit))
    return AutocompleteResponse(features=features)
