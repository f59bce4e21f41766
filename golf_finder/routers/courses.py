"""
Golf course endpoints – search, lookup by name, details by ID.
"""

from datetime import date

from fastapi import APIRouter, Query, Request

from golf_finder.models import CourseDetailsResponse, SearchRequest, SearchResponse
from golf_finder.rate_limit import SEARCH, limiter
from golf_finder.services.registry import registry

router = APIRouter(prefix="/api/courses", tags=["courses"])


@router.post(
    "/search",
    response_model=SearchResponse,
    operation_id="searchCourses",
    summary="Search golf courses by location with filters and sorting",
)
@limiter.limit(SEARCH)
async def search_courses(request: Request, body: SearchRequest) -> SearchResponse:
    """
    Resolve the location (radius around a geocoded city when possible),
    filter on course attributes and tee-time availability for the
    requested date, then rank and cap the results.
    """
    return await registry.search.search(body)


@router.get(
    "/lookup",
    response_model=CourseDetailsResponse,
    operation_id="lookupCourse",
    summary="Find a course by name",
)
async def lookup_course(
    name: str = Query(..., min_length=1, description="Course name (case-insensitive substring)"),
    state: str | None = Query(None, description="US state code"),
    country: str | None = Query(None, description="Country"),
    day: date | None = Query(None, alias="date", description="Tee sheet date to refresh from a live provider"),
) -> CourseDetailsResponse:
    return await registry.search.get_details(name=name, state=state, country=country, day=day)


@router.get(
    "/{course_id}",
    response_model=CourseDetailsResponse,
    operation_id="getCourse",
    summary="Get full details of a course",
)
async def get_course(
    course_id: str,
    day: date | None = Query(None, alias="date", description="Tee sheet date to refresh from a live provider"),
) -> CourseDetailsResponse:
    return await registry.search.get_details(course_id=course_id, day=day)
