"""
Course search orchestration.

resolve location + date -> fetch candidates -> filter -> rank -> cap ->
attach per-date fields -> summary. Store failures never escape: a
failed radius lookup falls back to exact matching and a failed query
yields no courses.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from golf_finder.config import MAX_RESULTS
from golf_finder.errors import InvalidInput, NotFound, StorageError
from golf_finder.models import (
    Course,
    CourseDetailsResponse,
    CourseResult,
    SearchRequest,
    SearchResponse,
)
from golf_finder.services.availability import SlotWindow, match_date, range_open_on
from golf_finder.services.course_store import CourseStore
from golf_finder.services.dates import resolve_search_date
from golf_finder.services.filters import apply_filters
from golf_finder.services.location import (
    ExactMatchPlan,
    LocationResolution,
    LocationResolver,
    RadiusPlan,
    describe_location,
)
from golf_finder.services.ranking import SORT_LABELS, RankContext, rank
from golf_finder.services.teefox import LiveTeeSheets

logger = logging.getLogger(__name__)


def build_summary(
    count: int,
    location: str,
    *,
    near: bool,
    sort_by: str | None = None,
    day: date | None = None,
) -> str:
    """One-line description of a search result."""
    noun = "course" if count == 1 else "courses"
    text = f"Found {count} golf {noun} {'near' if near else 'in'} {location}"
    label = SORT_LABELS.get(sort_by or "")
    if label:
        text += f", sorted by {label}"
    if day is not None:
        text += f" with availability on {day.isoformat()}"
    return text + "."


def to_result(
    course: Course,
    day: date | None,
    window: SlotWindow,
    distance_miles: float | None = None,
) -> CourseResult:
    fields = course.model_dump(exclude={"availability"})
    fields["distance_miles"] = distance_miles
    if day is not None:
        matched = match_date(course, day, window)
        fields.update(
            matched_date=day,
            available_on_date=match_date(course, day).available_count > 0,
            available_slots_on_date=matched.available_count,
            cheapest_price_on_date=matched.cheapest_available_price,
            earliest_time_on_date=matched.earliest_available_time,
            range_open_on_date=range_open_on(course, day),
        )
    return CourseResult.model_validate(fields)


class CourseSearchService:
    def __init__(
        self,
        store: CourseStore,
        resolver: LocationResolver,
        *,
        max_results: int = MAX_RESULTS,
        today: Callable[[], date] = date.today,
        live: LiveTeeSheets | None = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._max_results = max_results
        self._today = today
        self._live = live

    async def search(self, request: SearchRequest) -> SearchResponse:
        resolution = await self._resolver.resolve(
            city=request.city,
            state=request.state,
            country=request.country,
            radius=request.radius,
        )
        today = self._today()
        day = resolve_search_date(request.date, request.relative_date, today)
        filters = request.filters

        candidates, distances, store_reason = await self._candidates(resolution)
        kept = apply_filters(candidates, filters, day, today)

        window = SlotWindow.from_filters(filters)
        context = RankContext(day=day, window=window, desired_time=filters.desired_time, today=today)
        ranked = rank(kept, filters.sort_by, context)
        ranked = ranked[: self._max_results]

        results = [to_result(c, day, window, distances.get(c.id)) for c in ranked]
        near = resolution.is_radius and store_reason is None
        summary = build_summary(
            len(results),
            resolution.description,
            near=near,
            sort_by=filters.sort_by,
            day=day,
        )
        logger.info(
            "Search %r: %d candidates, %d after filters, %d returned",
            resolution.description,
            len(candidates),
            len(kept),
            len(results),
        )
        return SearchResponse(
            courses=results,
            count=len(results),
            location=resolution.description,
            matched_date=day,
            degraded_reason=resolution.degraded_reason or store_reason,
            summary=summary,
        )

    async def _candidates(
        self, resolution: LocationResolution
    ) -> tuple[list[Course], dict[str, float], str | None]:
        """(courses, distance in miles by id, degraded reason)."""
        plan = resolution.plan
        try:
            if isinstance(plan, RadiusPlan):
                return await self._radius_candidates(plan)
            return await self._exact_candidates(plan), {}, None
        except StorageError as exc:
            logger.warning("Course store query failed, returning no courses: %s", exc)
            return [], {}, f"course store unavailable: {exc.message}"

    async def _exact_candidates(self, plan: ExactMatchPlan) -> list[Course]:
        return await self._store.search_courses(plan)

    async def _radius_candidates(
        self, plan: RadiusPlan
    ) -> tuple[list[Course], dict[str, float], str | None]:
        try:
            hits = await self._store.find_within_radius(plan.center_lat, plan.center_lon, plan.radius_meters)
        except StorageError as exc:
            logger.warning("Radius lookup failed, falling back to exact match: %s", exc)
            courses = await self._exact_candidates(plan.fallback)
            return courses, {}, f"radius lookup failed: {exc.message}"

        if not hits:
            return [], {}, None
        courses = await self._store.fetch_courses([h.id for h in hits])
        return courses, {h.id: round(h.distance_miles, 1) for h in hits}, None

    async def get_details(
        self,
        course_id: str | None = None,
        name: str | None = None,
        state: str | None = None,
        country: str | None = None,
        day: date | None = None,
    ) -> CourseDetailsResponse:
        """
        Look a course up by ID, or by name within an optional state/country.

        Courses with a live tee-sheet provider get *day* (default today)
        refreshed from the provider.
        """
        if not course_id and not name:
            raise InvalidInput("Provide a courseId or a course name")

        try:
            if course_id:
                course = await self._store.get_course(course_id)
            else:
                course = await self._store.find_course_by_name(name, state=state, country=country)
        except StorageError as exc:
            logger.warning("Course lookup failed: %s", exc)
            course = None

        if course is None:
            raise NotFound(
                "Course not found",
                details={"course_id": course_id, "name": name, "state": state, "country": country},
            )

        if self._live is not None:
            course = await self._live.refresh(course, day or self._today())

        return CourseDetailsResponse(course=course, summary=describe_course(course))


def describe_course(course: Course) -> str:
    where = describe_location(course.city, course.state, None if course.state else course.country)
    text = f"{course.name} in {where}: {course.holes}-hole {course.type} course, par {course.par}"
    if course.yardage:
        text += f", {course.yardage:,} yards"
    if course.average_price:
        text += f", about ${course.average_price:.0f} per round"
    return text + "."
