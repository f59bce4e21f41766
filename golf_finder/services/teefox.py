"""
Live tee sheets from the TeeFox API.

Courses booked through a provider with a real-time API (teefox, teebox)
get their slots for a date straight from the provider. A 404 means the
provider does not know the course and yields no tee times; any other
failure raises TeeTimeProviderError so callers can fall back to the
stored tee sheet.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx
from pydantic import BaseModel, Field

from golf_finder.config import TEEFOX_API_KEY, TEEFOX_API_URL, TEEFOX_TIMEOUT_SECONDS
from golf_finder.errors import TeeTimeProviderError
from golf_finder.models import Course, DailyAvailability, TeeSlot

logger = logging.getLogger(__name__)

LIVE_PROVIDERS = frozenset({"teefox", "teebox"})

MAX_GROUP = 4


def supports_live_availability(course: Course) -> bool:
    return bool(course.provider_id) and (course.booking_provider or "").lower() in LIVE_PROVIDERS


# ── TeeFox response shapes ────────────────────────────────────────────────


class TeeFoxTeeTime(BaseModel):
    location_id: str = Field(..., alias="locationId")
    timezone: Optional[str] = None
    appt_time: datetime = Field(..., alias="apptTime")
    price_per_patron: float = Field(..., ge=0, alias="pricePerPatron")  # cents
    patrons: int = 0
    booking_url: Optional[str] = Field(None, alias="bookingUrl")
    holes: Optional[int] = None

    def local_time(self) -> datetime:
        """Tee time on the course's wall clock."""
        if self.appt_time.tzinfo is None or not self.timezone:
            return self.appt_time
        try:
            return self.appt_time.astimezone(ZoneInfo(self.timezone))
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("Unknown timezone %r, keeping the provider offset", self.timezone)
            return self.appt_time

    def to_slot(self) -> TeeSlot:
        spots = max(0, min(self.patrons, MAX_GROUP))
        return TeeSlot(
            time=self.local_time().strftime("%H:%M"),
            available=spots > 0,
            price=round(self.price_per_patron / 100, 2),
            players_available=spots,
        )


class TeeFoxMeta(BaseModel):
    total_teetimes: int = Field(0, alias="totalTeetimes")
    next_page_token: Optional[str] = Field(None, alias="nextPageToken")


class TeeFoxResponse(BaseModel):
    meta: TeeFoxMeta = Field(default_factory=TeeFoxMeta)
    teetimes: List[TeeFoxTeeTime] = Field(default_factory=list)


def to_daily_availability(day: date, teetimes: List[TeeFoxTeeTime]) -> DailyAvailability:
    """
    Tee sheet for *day* built from provider tee times.

    The provider lists 9- and 18-hole offers separately; when two share a
    start time the one with more open spots (then the cheaper one) wins.
    """
    by_time: dict[str, TeeSlot] = {}
    for teetime in teetimes:
        if teetime.local_time().date() != day:
            continue
        slot = teetime.to_slot()
        current = by_time.get(slot.time)
        if current is None or (slot.players_available, -slot.price) > (current.players_available, -current.price):
            by_time[slot.time] = slot
    return DailyAvailability(date=day, tee_times=list(by_time.values()))


# ── Client ────────────────────────────────────────────────────────────────


class TeeFoxClient:
    """Async HTTP client for the TeeFox tee-times endpoint."""

    def __init__(
        self,
        api_key: str = TEEFOX_API_KEY,
        *,
        url: str = TEEFOX_API_URL,
        timeout: float = TEEFOX_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._client = httpx.AsyncClient(
            headers={"x-api-key": api_key, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_tee_times(
        self,
        location_id: str,
        day: date,
        *,
        patrons: list[int] | None = None,
        holes: list[int] | None = None,
    ) -> TeeFoxResponse:
        params = {"location_id": location_id, "date": day.isoformat()}
        if patrons:
            params["patrons"] = "[" + ",".join(str(p) for p in patrons) + "]"
        if holes:
            params["holes"] = "[" + ",".join(str(h) for h in holes) + "]"

        logger.debug("TeeFox request: %s on %s", location_id, day)
        try:
            resp = await self._client.get(self._url, params=params)
            if resp.status_code == 404:
                logger.info("TeeFox does not list course %s", location_id)
                return TeeFoxResponse()
            resp.raise_for_status()
            payload = TeeFoxResponse.model_validate(resp.json())
        except httpx.HTTPError as exc:
            raise TeeTimeProviderError(
                f"TeeFox request failed: {exc}",
                details={"location_id": location_id, "date": day.isoformat()},
            ) from exc
        except ValueError as exc:
            raise TeeTimeProviderError(
                "TeeFox returned an unexpected payload",
                details={"location_id": location_id, "date": day.isoformat()},
            ) from exc

        logger.info("TeeFox returned %d tee times for %s on %s", len(payload.teetimes), location_id, day)
        return payload


class LiveTeeSheets:
    """Replaces a course's stored tee sheet for one date with the provider's."""

    def __init__(self, client: TeeFoxClient) -> None:
        self._client = client

    async def refresh(self, course: Course, day: date) -> Course:
        if not supports_live_availability(course):
            return course
        try:
            payload = await self._client.get_tee_times(course.provider_id, day)
        except TeeTimeProviderError as exc:
            logger.warning("Live tee times unavailable for %s on %s, using stored sheet: %s", course.id, day, exc)
            return course

        sheet = to_daily_availability(day, payload.teetimes)
        others = [s for s in course.availability if s.date != day]
        return course.model_copy(update={"availability": sorted(others + [sheet], key=lambda s: s.date)})
