"""Fill in missing activity coordinates via forward geocoding."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol, Sequence

from .errors import ActivityValidationError, LocationNotFoundError
from .models import Activity, Coordinate

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    async def geocode(self, text: str) -> Optional[Coordinate]: ...


async def _resolve_one(activity: Activity, geocoder: Geocoder) -> Activity:
    if activity.coordinate is not None:
        return activity

    location = (activity.location or "").strip()
    if not location:
        raise ActivityValidationError(
            f"Activity {activity.id!r} needs either coordinates or a location.",
            activity_id=activity.id,
        )

    coordinate = await geocoder.geocode(location)
    if coordinate is None:
        raise LocationNotFoundError(activity.id, location)
    logger.debug(f"Geocoded activity {activity.id} ({location!r}) to {coordinate.lat},{coordinate.lng}")
    return activity.with_coordinate(coordinate)


async def resolve_coordinates(activities: Sequence[Activity], geocoder: Geocoder) -> list[Activity]:
    """Return the activities in input order, each with a coordinate.

    Lookups run concurrently; the first failure fails the whole batch.
    """
    return list(await asyncio.gather(*(_resolve_one(activity, geocoder) for activity in activities)))
