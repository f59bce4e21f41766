"""
Course storage interface.

The search and booking services only talk to the CourseStore protocol,
so the backing store (SQLite here, an in-memory fake in tests) can be
swapped freely. Implementations raise StorageError on any failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Protocol, TypeVar

import aiosqlite

from golf_finder import db
from golf_finder.config import METERS_PER_MILE, STORAGE_TIMEOUT_SECONDS
from golf_finder.errors import StorageError
from golf_finder.models import Course
from golf_finder.services.location import ExactMatchPlan

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Candidate pool fetched before filtering; the response cap is applied later.
CANDIDATE_LIMIT = 500


@dataclass(frozen=True)
class RadiusHit:
    id: str
    distance_meters: float

    @property
    def distance_miles(self) -> float:
        return self.distance_meters / METERS_PER_MILE


class CourseStore(Protocol):
    """Protocol that every course store must satisfy. Only open courses are searched."""

    async def search_courses(self, plan: ExactMatchPlan, limit: int = CANDIDATE_LIMIT) -> list[Course]:
        """Courses matching an exact-match location plan."""
        ...

    async def fetch_courses(self, course_ids: list[str]) -> list[Course]:
        """Courses with the given IDs, keeping the order of *course_ids*."""
        ...

    async def find_within_radius(self, lat: float, lon: float, radius_meters: float) -> list[RadiusHit]:
        """Courses within *radius_meters* of the point, nearest first."""
        ...

    async def get_course(self, course_id: str) -> Course | None:
        ...

    async def find_course_by_name(
        self,
        name: str,
        state: str | None = None,
        country: str | None = None,
    ) -> Course | None:
        ...


class SqliteCourseStore:
    """CourseStore backed by the aiosqlite repository in golf_finder.db."""

    def __init__(self, *, timeout: float = STORAGE_TIMEOUT_SECONDS) -> None:
        self._timeout = timeout

    async def _call(self, op: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise StorageError(f"{op} timed out after {self._timeout}s") from exc
        except aiosqlite.Error as exc:
            raise StorageError(f"{op} failed: {exc}") from exc

    async def search_courses(self, plan: ExactMatchPlan, limit: int = CANDIDATE_LIMIT) -> list[Course]:
        return await self._call(
            "search_courses",
            db.search_courses(city=plan.city, state=plan.state, country=plan.country, limit=limit),
        )

    async def fetch_courses(self, course_ids: list[str]) -> list[Course]:
        return await self._call("fetch_courses", db.fetch_courses(course_ids, limit=CANDIDATE_LIMIT))

    async def find_within_radius(self, lat: float, lon: float, radius_meters: float) -> list[RadiusHit]:
        rows = await self._call("find_within_radius", db.courses_within_radius(lat, lon, radius_meters))
        return [RadiusHit(id=cid, distance_meters=dist) for cid, dist in rows]

    async def get_course(self, course_id: str) -> Course | None:
        return await self._call("get_course", db.get_course(course_id))

    async def find_course_by_name(
        self,
        name: str,
        state: str | None = None,
        country: str | None = None,
    ) -> Course | None:
        return await self._call(
            "find_course_by_name",
            db.find_course_by_name(name, state=state, country=country),
        )
