"""Routing orchestration service."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from ...config import settings
from ...schemas.routing import (
    ActivityModel,
    FallbackRouteResponse,
    PointModel,
    RouteOptimizeRequest,
    RouteOptimizeResponse,
    RouteSummaryModel,
)
from ..geospatial import path_length_m
from .errors import ActivityValidationError, ConfigurationError
from .models import Activity, Coordinate, FallbackRoute, OptimizedRoute, RouteResult, TravelMatrix
from .resolver import resolve_coordinates
from .sequence_solver import solve_sequence, summarize_path

logger = logging.getLogger(__name__)


class RoutingClient(Protocol):
    configured: bool

    async def geocode(self, text: str) -> Optional[Coordinate]: ...

    async def route_matrix(self, coordinates: Sequence[Coordinate], mode: str = "drive") -> TravelMatrix: ...

    async def route(self, coordinates: Sequence[Coordinate], mode: str = "drive") -> RouteResult: ...


def _require_minimum(activities: Sequence[Activity]) -> None:
    if len(activities) < 2:
        raise ActivityValidationError("At least two activities are required.")


def build_fallback_route(points: Sequence[Coordinate], mode: str | None = None) -> FallbackRoute:
    """Estimate a route from great-circle distance and an assumed average speed."""
    distance_meters = path_length_m(points)
    duration_seconds = round(distance_meters / settings.fallback_average_speed_mps)
    return FallbackRoute(
        mode=mode or settings.default_travel_mode,
        distance_meters=distance_meters,
        duration_seconds=duration_seconds,
        points=list(points),
    )


def _fallback_if_unconfigured(
    activities: Sequence[Activity], client: RoutingClient, mode: str
) -> FallbackRoute | None:
    if client.configured:
        return None
    if not all(activity.is_resolved for activity in activities):
        # Geocoding has no offline substitute.
        raise ConfigurationError("GEOAPIFY_API_KEY is required to geocode activity locations.")
    logger.info(f"Routing provider not configured; returning straight-line estimate for {len(activities)} stops")
    return build_fallback_route([activity.coordinate for activity in activities], mode)


async def optimize_activities(
    activities: Sequence[Activity],
    client: RoutingClient,
    mode: str | None = None,
) -> OptimizedRoute | FallbackRoute:
    """Reorder the interior stops of a day to shorten travel, keeping the first and last fixed."""
    mode = mode or settings.default_travel_mode
    _require_minimum(activities)
    if len(activities) > settings.max_optimize_activities:
        raise ActivityValidationError(
            f"Route optimization supports at most {settings.max_optimize_activities} activities "
            f"(got {len(activities)})."
        )

    fallback = _fallback_if_unconfigured(activities, client, mode)
    if fallback is not None:
        return fallback

    resolved = await resolve_coordinates(activities, client)
    coordinates = [activity.coordinate for activity in resolved]

    matrix = await client.route_matrix(coordinates, mode)
    order = solve_sequence(matrix.times)
    ordered = [resolved[index] for index in order]
    matrix_summary = summarize_path(matrix, order)
    logger.debug(f"Optimized order {order} (matrix time {matrix_summary.total_time:.0f}s)")

    route = await client.route([activity.coordinate for activity in ordered], mode)

    return OptimizedRoute(
        activities=ordered,
        geometry=route.geometry,
        total_distance=route.distance if route.distance is not None else matrix_summary.total_distance,
        total_time=route.time if route.time is not None else matrix_summary.total_time,
        matrix_summary=matrix_summary,
        order=order,
    )


async def calculate_activities(
    activities: Sequence[Activity],
    client: RoutingClient,
    mode: str | None = None,
) -> OptimizedRoute | FallbackRoute:
    """Route the activities in the given order, without reordering or a matrix lookup."""
    mode = mode or settings.default_travel_mode
    _require_minimum(activities)

    fallback = _fallback_if_unconfigured(activities, client, mode)
    if fallback is not None:
        return fallback

    resolved = await resolve_coordinates(activities, client)
    route = await client.route([activity.coordinate for activity in resolved], mode)
    return OptimizedRoute(
        activities=resolved,
        geometry=route.geometry,
        total_distance=route.distance if route.distance is not None else 0.0,
        total_time=route.time if route.time is not None else 0.0,
        matrix_summary=None,
        order=list(range(len(resolved))),
    )


def _to_activity(model: ActivityModel) -> Activity:
    coordinate = None
    if model.lat is not None and model.lng is not None:
        coordinate = Coordinate(lat=model.lat, lng=model.lng)
    return Activity(
        id=model.id,
        coordinate=coordinate,
        location=model.location,
        extra=dict(model.model_extra or {}),
    )


def _to_activity_model(activity: Activity) -> ActivityModel:
    return ActivityModel(
        id=activity.id,
        lat=activity.coordinate.lat,
        lng=activity.coordinate.lng,
        location=activity.location,
        **activity.extra,
    )


def _to_response(
    result: OptimizedRoute | FallbackRoute, day_id: str | None = None
) -> RouteOptimizeResponse | FallbackRouteResponse:
    if isinstance(result, FallbackRoute):
        return FallbackRouteResponse(
            day_id=day_id,
            mode=result.mode,
            distance_meters=result.distance_meters,
            duration_seconds=result.duration_seconds,
            points=[PointModel(lat=point.lat, lng=point.lng) for point in result.points],
        )
    summary = result.matrix_summary
    return RouteOptimizeResponse(
        day_id=day_id,
        optimized_activities=[_to_activity_model(activity) for activity in result.activities],
        route_geometry=result.geometry,
        total_distance=result.total_distance,
        total_time=result.total_time,
        matrix_summary=RouteSummaryModel(total_distance=summary.total_distance, total_time=summary.total_time)
        if summary is not None
        else None,
    )


async def optimize_route(
    payload: RouteOptimizeRequest, client: RoutingClient
) -> RouteOptimizeResponse | FallbackRouteResponse:
    activities = [_to_activity(model) for model in payload.activities]
    result = await optimize_activities(activities, client, payload.mode)
    return _to_response(result, payload.day_id)


async def calculate_route(
    payload: RouteOptimizeRequest, client: RoutingClient
) -> RouteOptimizeResponse | FallbackRouteResponse:
    activities = [_to_activity(model) for model in payload.activities]
    result = await calculate_activities(activities, client, payload.mode)
    return _to_response(result, payload.day_id)
