"""
Geocode cache.

Maps a normalised location query ("san diego, ca, usa") to its center
point, or to None when the location is known to be unresolvable. Entries
live for the lifetime of the process and are never evicted.

The resolver talks to the GeocodeCache protocol so tests can hand it a
fresh InMemoryGeocodeCache instead of the process-wide instance::

    cache = InMemoryGeocodeCache()
    resolver = LocationResolver(geocoder, cache)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float


def normalize_query(query: str) -> str:
    return " ".join(query.split()).lower()


class GeocodeCache(Protocol):
    """Protocol that every geocode cache must satisfy."""

    def has(self, query: str) -> bool:
        """True when *query* has been looked up before (hit or miss)."""
        ...

    def get(self, query: str) -> GeoPoint | None:
        """Cached point, or None for a cached miss or an unknown query."""
        ...

    def set(self, query: str, point: GeoPoint | None) -> None:
        """Remember the result of a lookup. None marks the query unresolvable."""
        ...


class InMemoryGeocodeCache:
    """
    Dict-backed GeocodeCache.

    Concurrent requests may both miss and both write the same key; the
    value for a given query is always the same so the last write wins
    harmlessly.
    """

    def __init__(self) -> None:
        self._entries: dict[str, GeoPoint | None] = {}

    def has(self, query: str) -> bool:
        return normalize_query(query) in self._entries

    def get(self, query: str) -> GeoPoint | None:
        return self._entries.get(normalize_query(query))

    def set(self, query: str, point: GeoPoint | None) -> None:
        key = normalize_query(query)
        self._entries[key] = point
        if point is None:
            logger.debug("Cached unresolvable location %r", key)
        else:
            logger.debug("Cached location %r -> (%.4f, %.4f)", key, point.lat, point.lon)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
