"""Typed failures raised by the routing services."""

from __future__ import annotations


class RoutingError(Exception):
    """Base error carrying a machine-readable kind and the HTTP status it maps to."""

    kind = "routing_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ActivityValidationError(RoutingError):
    kind = "validation_error"
    status_code = 400

    def __init__(self, message: str, activity_id: str | None = None) -> None:
        super().__init__(message)
        self.activity_id = activity_id

    def to_detail(self) -> dict:
        detail = super().to_detail()
        if self.activity_id is not None:
            detail["activity_id"] = self.activity_id
        return detail


class LocationNotFoundError(ActivityValidationError):
    kind = "location_not_found"

    def __init__(self, activity_id: str, location: str) -> None:
        super().__init__(
            f"Could not find coordinates for activity {activity_id!r} (location {location!r}).",
            activity_id=activity_id,
        )
        self.location = location


class ConfigurationError(RoutingError):
    kind = "configuration_error"
    status_code = 503


class UpstreamError(RoutingError):
    kind = "upstream_error"
    status_code = 502
