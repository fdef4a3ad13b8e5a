"""Routing request/response schemas."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActivityModel(_CamelModel):
    """One stop of a day plan. Unknown fields (name, start time, ...) are passed through."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str = Field(..., min_length=1)
    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)
    location: Optional[str] = Field(default=None, description="Free-text place name, geocoded when lat/lng are absent.")

    @model_validator(mode="after")
    def _has_position(self) -> "ActivityModel":
        if (self.lat is None) != (self.lng is None):
            raise ValueError(f"Activity {self.id!r} must provide both lat and lng, or neither.")
        if self.lat is None and not (self.location and self.location.strip()):
            raise ValueError(f"Activity {self.id!r} needs either lat/lng or a location.")
        return self


class RouteOptimizeRequest(_CamelModel):
    day_id: Optional[str] = Field(default=None, description="Itinerary day the activities belong to; echoed back in the response.")
    mode: Optional[str] = Field(default=None, description="Travel mode, defaults to 'drive'.")
    activities: List[ActivityModel] = Field(..., min_length=2, description="At least two activities are required.")

    @field_validator("activities")
    @classmethod
    def _unique_ids(cls, activities: List[ActivityModel]) -> List[ActivityModel]:
        seen: set[str] = set()
        for activity in activities:
            if activity.id in seen:
                raise ValueError(f"Duplicate activity id {activity.id!r}.")
            seen.add(activity.id)
        return activities


class RouteSummaryModel(_CamelModel):
    total_distance: float
    total_time: float


class RouteOptimizeResponse(_CamelModel):
    day_id: Optional[str] = None
    optimized_activities: List[ActivityModel]
    route_geometry: dict[str, Any]
    total_distance: float
    total_time: float
    matrix_summary: Optional[RouteSummaryModel] = None


class PointModel(BaseModel):
    lat: float
    lng: float


class FallbackRouteResponse(_CamelModel):
    """Straight-line estimate returned when no routing provider key is configured."""

    fallback: bool = True
    day_id: Optional[str] = None
    mode: str
    distance_meters: float
    duration_seconds: int
    points: List[PointModel]


class AutocompleteResponse(BaseModel):
    features: List[dict[str, Any]]
