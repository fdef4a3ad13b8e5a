"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, List, Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude {self.lat} is outside [-90, 90].")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude {self.lng} is outside [-180, 180].")

    def as_lng_lat(self) -> list[float]:
        return [self.lng, self.lat]


@dataclass(slots=True)
class Activity:
    """A single stop of a day plan.

    ``coordinate`` is optional on the way in and mandatory once the
    resolver has run. ``extra`` keeps any caller fields (names, times)
    so they round-trip through the optimizer untouched.
    """

    id: str
    coordinate: Optional[Coordinate] = None
    location: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def is_resolved(self) -> bool:
        return self.coordinate is not None

    def with_coordinate(self, coordinate: Coordinate) -> "Activity":
        return replace(self, coordinate=coordinate)


@dataclass(frozen=True, slots=True)
class TravelMatrix:
    """Pairwise distances (meters) and times (seconds); ``None`` marks pairs the provider could not compute."""

    distances: List[List[Optional[float]]]
    times: List[List[Optional[float]]]
    raw: Any = None


@dataclass(frozen=True, slots=True)
class RouteSummary:
    total_distance: float
    total_time: float


@dataclass(frozen=True, slots=True)
class RouteResult:
    geometry: dict
    distance: Optional[float]
    time: Optional[float]
    raw: Any = None


@dataclass(slots=True)
class OptimizedRoute:
    activities: List[Activity]
    geometry: dict
    total_distance: float
    total_time: float
    matrix_summary: Optional[RouteSummary]
    order: List[int]


@dataclass(slots=True)
class FallbackRoute:
    mode: str
    distance_meters: float
    duration_seconds: int
    points: List[Coordinate]
