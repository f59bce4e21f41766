"""
Location resolution.

Turns the caller's (city, state, country, radius) into either a radius
plan around a geocoded center or an exact-match plan on the location
columns. US searches use ``state``, international searches ``country``;
the two are mutually exclusive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from golf_finder.config import DEFAULT_CITY_RADIUS_MILES, METERS_PER_MILE
from golf_finder.errors import GeocodingError, InvalidLocation
from golf_finder.services.cache import GeocodeCache
from golf_finder.services.geocoding import Geocoder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExactMatchPlan:
    """City is a case-insensitive substring; state (upper-cased) and country match exactly."""

    city: str | None = None
    state: str | None = None
    country: str | None = None


@dataclass(frozen=True)
class RadiusPlan:
    center_lat: float
    center_lon: float
    radius_miles: float
    # Used when the store's radius lookup is unavailable.
    fallback: ExactMatchPlan = field(default_factory=ExactMatchPlan)

    @property
    def radius_meters(self) -> float:
        return self.radius_miles * METERS_PER_MILE


LocationPlan = ExactMatchPlan | RadiusPlan


@dataclass(frozen=True)
class LocationResolution:
    """
    Outcome of resolving a location.

    ``degraded_reason`` is None when the preferred plan was produced and
    explains the fallback otherwise (radius wanted, exact match used).
    """

    plan: LocationPlan
    description: str
    degraded_reason: str | None = None

    @property
    def is_degraded(self) -> bool:
        return self.degraded_reason is not None

    @property
    def is_radius(self) -> bool:
        return isinstance(self.plan, RadiusPlan)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def geocode_query(city: str | None, state: str | None, country: str | None) -> str | None:
    """Free-text query sent to the geocoder."""
    if city and state:
        return f"{city}, {state.upper()}, USA"
    if city and country:
        return f"{city}, {country}"
    if city:
        return city
    if state:
        return f"{state.upper()}, USA"
    if country:
        return country
    return None


def describe_location(city: str | None, state: str | None, country: str | None) -> str:
    if city and state:
        return f"{city}, {state.upper()}"
    if city and country:
        return f"{city}, {country}"
    if city:
        return city
    if state:
        return state.upper()
    if country:
        return country
    return "Unknown location"


class LocationResolver:
    """Resolves search locations, consulting the geocode cache before the geocoder."""

    def __init__(
        self,
        geocoder: Geocoder | None,
        cache: GeocodeCache,
        *,
        default_radius_miles: float = DEFAULT_CITY_RADIUS_MILES,
    ) -> None:
        self._geocoder = geocoder
        self._cache = cache
        self._default_radius = default_radius_miles

    async def resolve(
        self,
        city: str | None = None,
        state: str | None = None,
        country: str | None = None,
        radius: float | None = None,
    ) -> LocationResolution:
        city, state, country = _clean(city), _clean(state), _clean(country)

        if not (city or state or country):
            raise InvalidLocation("Provide at least one of city, state or country")
        if state and country:
            raise InvalidLocation(
                "Use state for US searches or country for international searches, not both",
                details={"state": state, "country": country},
            )

        exact = ExactMatchPlan(
            city=city,
            state=state.upper() if state else None,
            country=country,
        )
        description = describe_location(city, state, country)

        if not city:
            return LocationResolution(plan=exact, description=description)

        if radius is None:
            radius = self._default_radius
        if radius <= 0:
            return LocationResolution(plan=exact, description=description)

        query = geocode_query(city, state, country)
        point, reason = await self._lookup(query)
        if point is None:
            return LocationResolution(plan=exact, description=description, degraded_reason=reason)

        logger.info("Geocoded %r -> (%.4f, %.4f), radius %.0f mi", query, point.lat, point.lon, radius)
        return LocationResolution(
            plan=RadiusPlan(
                center_lat=point.lat,
                center_lon=point.lon,
                radius_miles=radius,
                fallback=exact,
            ),
            description=description,
        )

    async def _lookup(self, query: str):
        """(point, None) on success, (None, reason) otherwise. Misses are cached too."""
        if self._cache.has(query):
            point = self._cache.get(query)
            if point is None:
                return None, f"location '{query}' could not be geocoded (cached)"
            return point, None

        if self._geocoder is None:
            self._cache.set(query, None)
            return None, "geocoding is not configured"

        try:
            result = await self._geocoder.geocode(query)
        except GeocodingError as exc:
            logger.warning("Geocoding failed for %r, using exact match: %s", query, exc)
            self._cache.set(query, None)
            return None, f"geocoding failed: {exc.message}"

        if result is None:
            self._cache.set(query, None)
            return None, f"location '{query}' could not be geocoded"

        self._cache.set(query, result.point)
        return result.point, None
