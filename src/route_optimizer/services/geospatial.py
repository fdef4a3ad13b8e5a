"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from .routing.models import Coordinate

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in meters between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def path_length_m(points: Sequence[Coordinate]) -> float:
    """Great-circle length of the polyline through ``points`` in the given order."""

    return sum(
        haversine_m(start.lat, start.lng, end.lat, end.lng)
        for start, end in zip(points, points[1:])
    )
