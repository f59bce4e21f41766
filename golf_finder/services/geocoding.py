"""
Forward geocoding via the Mapbox Places API.

Turns a free-text location ("San Diego, CA, USA") into a center point.
A missing token and an empty result both come back as None; transport
and payload problems raise GeocodingError so the caller can degrade.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol
from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field

from golf_finder.config import GEOCODE_TIMEOUT_SECONDS, MAPBOX_GEOCODING_URL, MAPBOX_TOKEN
from golf_finder.errors import GeocodingError
from golf_finder.services.cache import GeoPoint

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": "Mozilla/5.0 (compatible; GolfFinder/0.1)",
    "Accept": "application/json",
}


@dataclass(frozen=True)
class GeocodeResult:
    lat: float
    lon: float
    display_name: str

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)


class Geocoder(Protocol):
    async def geocode(self, query: str) -> GeocodeResult | None:
        """Center point for *query*, or None when it cannot be resolved."""
        ...


# ── Mapbox response shapes ────────────────────────────────────────────────


class MapboxFeature(BaseModel):
    center: List[float] = Field(..., min_length=2, max_length=2)  # [lon, lat]
    place_name: str = ""


class MapboxResponse(BaseModel):
    features: List[MapboxFeature] = Field(default_factory=list)


# ── Client ────────────────────────────────────────────────────────────────


class MapboxGeocoder:
    """Async HTTP client for Mapbox forward geocoding."""

    def __init__(
        self,
        token: str = MAPBOX_TOKEN,
        *,
        base_url: str = MAPBOX_GEOCODING_URL,
        timeout: float = GEOCODE_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def geocode(self, query: str) -> GeocodeResult | None:
        if not self._token:
            logger.warning("MAPBOX_TOKEN not set, skipping geocoding for %r", query)
            return None

        url = f"{self._base_url}/{quote(query)}.json"
        logger.debug("Mapbox geocoding request: %s", query)
        try:
            resp = await self._client.get(url, params={"access_token": self._token, "limit": 1})
            resp.raise_for_status()
            payload = MapboxResponse.model_validate(resp.json())
        except httpx.HTTPError as exc:
            raise GeocodingError(f"Mapbox request failed: {exc}", details={"query": query}) from exc
        except ValueError as exc:
            raise GeocodingError("Mapbox returned an unexpected payload", details={"query": query}) from exc

        if not payload.features:
            logger.info("No geocoding results for %r", query)
            return None

        feature = payload.features[0]
        lon, lat = feature.center
        return GeocodeResult(lat=lat, lon=lon, display_name=feature.place_name or query)
