"""HTTP client for the Geoapify geocoding and routing APIs."""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Optional, Sequence

import httpx

from ...config import settings
from .cache import TTLCache
from .errors import ActivityValidationError, ConfigurationError, UpstreamError
from .models import Coordinate, RouteResult, TravelMatrix

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_text(text: str) -> str:
    return " ".join(text.split()).lower()


def _feature_coordinate(feature: Any) -> Optional[Coordinate]:
    """Extract (lat, lng) from a GeoJSON feature, preferring Geoapify's flat properties."""
    if not isinstance(feature, dict):
        return None
    properties = feature.get("properties")
    if not isinstance(properties, dict):
        properties = {}
    lat, lng = properties.get("lat"), properties.get("lon")
    if not (_is_number(lat) and _is_number(lng)):
        geometry = feature.get("geometry")
        if not isinstance(geometry, dict):
            return None
        coordinates = geometry.get("coordinates")
        if not isinstance(coordinates, (list, tuple)) or len(coordinates) < 2:
            return None
        lng, lat = coordinates[0], coordinates[1]
        if not (_is_number(lat) and _is_number(lng)):
            return None
    try:
        return Coordinate(lat=float(lat), lng=float(lng))
    except ValueError:
        return None


class GeoapifyClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        autocomplete_cache: TTLCache | None = None,
        matrix_cache: TTLCache | None = None,
        clock: Callable[[], float] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        key = api_key if api_key is not None else settings.geoapify_api_key
        self.api_key = key.strip() if key and key.strip() else None
        self.base_url = (base_url or settings.geoapify_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.geoapify_timeout_seconds
        self.autocomplete_ttl_seconds = settings.autocomplete_ttl_seconds
        self.matrix_ttl_seconds = settings.matrix_ttl_seconds
        self.autocomplete_limit = settings.autocomplete_limit
        self._autocomplete_cache = autocomplete_cache if autocomplete_cache is not None else TTLCache(clock=clock)
        self._matrix_cache = matrix_cache if matrix_cache is not None else TTLCache(clock=clock)
        self._transport = transport

    @property
    def configured(self) -> bool:
        return self.api_key is not None

    def _require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("GEOAPIFY_API_KEY is required for this endpoint.")
        return self.api_key

    def _get_client(self) -> httpx.AsyncClient:
        # One short-lived client per call; the caches are the only state shared across requests.
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any],
        payload: dict[str, Any] | None = None,
    ) -> dict:
        logger.debug(f"Geoapify {method} {path}")
        try:
            async with self._get_client() as client:
                response = await client.request(method, path, params=params, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(f"Geoapify {path} returned HTTP {exc.response.status_code}")
            raise UpstreamError(
                f"Routing provider request to {path} failed with status {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning(f"Geoapify {path} request failed: {exc!r}")
            raise UpstreamError(f"Routing provider request to {path} failed.") from exc
        except ValueError as exc:
            logger.warning(f"Geoapify {path} returned a non-JSON body")
            raise UpstreamError(f"Routing provider returned an unreadable response for {path}.") from exc

        if not isinstance(data, dict):
            raise UpstreamError(f"Routing provider returned an unexpected payload for {path}.")
        return data

    async def autocomplete(self, text: str, limit: int | None = None) -> list[dict]:
        """Forward-geocode free text, returning the provider's GeoJSON features."""
        api_key = self._require_api_key()
        limit = limit or self.autocomplete_limit
        cache_key = ("autocomplete", normalize_text(text), limit)
        cached = self._autocomplete_cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Autocomplete cache hit for {text!r}")
            return cached

        data = await self._request(
            "GET",
            "/geocode/autocomplete",
            params={"text": text, "limit": limit, "apiKey": api_key},
        )
        features = data.get("features")
        if not isinstance(features, list):
            features = []

        self._autocomplete_cache.set(cache_key, features, self.autocomplete_ttl_seconds)
        return features

    async def geocode(self, text: str) -> Optional[Coordinate]:
        """Return the top match for ``text``, or None when nothing usable was found."""
        features = await self.autocomplete(text, self.autocomplete_limit)
        if not features:
            return None
        return _feature_coordinate(features[0])

    async def route_matrix(self, coordinates: Sequence[Coordinate], mode: str = "drive") -> TravelMatrix:
        """Get the pairwise distance/time matrix. Cached per exact coordinate order and mode."""
        api_key = self._require_api_key()
        if len(coordinates) < 1:
            raise ActivityValidationError("At least one coordinate is required for a route matrix.")

        locations = [coordinate.as_lng_lat() for coordinate in coordinates]
        cache_key = ("matrix", mode, tuple((c.lng, c.lat) for c in coordinates))
        cached = self._matrix_cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Route matrix cache hit ({len(coordinates)} points, mode={mode})")
            return cached

        waypoints = [{"location": location} for location in locations]
        data = await self._request(
            "POST",
            "/routematrix",
            params={"apiKey": api_key},
            payload={"mode": mode, "sources": waypoints, "targets": waypoints},
        )

        rows = data.get("sources_to_targets")
        if rows is None:
            rows = data.get("matrix")
        size = len(coordinates)
        if not isinstance(rows, list) or len(rows) != size:
            raise UpstreamError("Unexpected route matrix response from the routing provider.")

        distances: list[list[Optional[float]]] = []
        times: list[list[Optional[float]]] = []
        for row in rows:
            if not isinstance(row, list) or len(row) != size:
                raise UpstreamError("Unexpected route matrix response from the routing provider.")
            distance_row: list[Optional[float]] = []
            time_row: list[Optional[float]] = []
            for cell in row:
                cell = cell if isinstance(cell, dict) else {}
                distance = cell.get("distance")
                distance_row.append(float(distance) if _is_number(distance) else None)
                travel_time = cell.get("time")
                if not _is_number(travel_time):
                    travel_time = cell.get("duration")
                time_row.append(float(travel_time) if _is_number(travel_time) else None)
            distances.append(distance_row)
            times.append(time_row)

        matrix = TravelMatrix(distances=distances, times=times, raw=data)
        self._matrix_cache.set(cache_key, matrix, self.matrix_ttl_seconds)
        return matrix

    async def route(self, coordinates: Sequence[Coordinate], mode: str = "drive") -> RouteResult:
        """Get the routed path through ``coordinates`` in the given order.

        Not cached: a different stop order produces a materially different route.
        """
        api_key = self._require_api_key()
        if len(coordinates) < 2:
            raise ActivityValidationError("At least two coordinates are required for a route.")

        waypoints = "|".join(f"{c.lat},{c.lng}" for c in coordinates)
        data = await self._request(
            "GET",
            "/routing",
            params={"waypoints": waypoints, "mode": mode, "apiKey": api_key},
        )

        features = data.get("features")
        feature = None
        if isinstance(features, list):
            feature = next(
                (item for item in features if isinstance(item, dict) and isinstance(item.get("geometry"), dict)),
                None,
            )
        if feature is None:
            raise UpstreamError("Routing provider did not return a route geometry.")

        properties = feature.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        distance = properties.get("distance")
        travel_time = properties.get("time")
        return RouteResult(
            geometry=feature["geometry"],
            distance=float(distance) if _is_number(distance) else None,
            time=float(travel_time) if _is_number(travel_time) else None,
            raw=data,
        )

    async def check_health(self) -> bool:
        """Check provider reachability with a minimal, uncached autocomplete request."""
        if not self.configured:
            return False
        try:
            data = await self._request(
                "GET",
                "/geocode/autocomplete",
                params={"text": "Berlin", "limit": 1, "apiKey": self.api_key},
            )
        except UpstreamError:
            return False
        return isinstance(data.get("features"), list)


@functools.lru_cache(maxsize=1)
def get_geoapify_client() -> GeoapifyClient:
    """Process-wide client so the autocomplete and matrix caches are shared between requests."""
    return GeoapifyClient()
