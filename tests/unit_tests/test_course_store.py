"""Tests for the SQLite course store."""

from __future__ import annotations

from datetime import timedelta

import pytest

from golf_finder import db
from golf_finder.errors import StorageError
from golf_finder.services.course_store import SqliteCourseStore
from golf_finder.services.location import ExactMatchPlan
from tests.mocks.models import (
    ALL_COURSES,
    BALBOA,
    SAN_DIEGO_CENTER,
    TODAY,
    TOMORROW,
    make_course,
    make_day,
    make_slot,
)


@pytest.fixture()
async def _init_db(tmp_path):
    await db.init_db(str(tmp_path / "courses_test.db"))
    for course in ALL_COURSES:
        await db.upsert_course(course)
    yield
    await db.close_db()


@pytest.fixture()
def store() -> SqliteCourseStore:
    return SqliteCourseStore(timeout=5)


@pytest.mark.asyncio
async def test_round_trip_keeps_tee_sheet(_init_db, store):
    course = await store.get_course("balboa-park")
    assert course == BALBOA
    assert [d.date for d in course.availability] == [TODAY, TOMORROW]


@pytest.mark.asyncio
async def test_exact_match_by_city_substring_and_state(_init_db, store):
    courses = await store.search_courses(ExactMatchPlan(city="diego", state="ca"))
    assert [c.id for c in courses] == ["balboa-park"]


@pytest.mark.asyncio
async def test_exact_match_by_country_is_case_insensitive(_init_db, store):
    courses = await store.search_courses(ExactMatchPlan(country="united kingdom"))
    assert [c.id for c in courses] == ["wentworth-west"]


@pytest.mark.asyncio
async def test_search_respects_limit(_init_db, store):
    courses = await store.search_courses(ExactMatchPlan(state="CA"), limit=2)
    assert len(courses) == 2


@pytest.mark.asyncio
async def test_radius_lookup_nearest_first(_init_db, store):
    lat, lon = SAN_DIEGO_CENTER
    hits = await store.find_within_radius(lat, lon, 25 * 1609.34)
    assert [h.id for h in hits] == ["balboa-park", "maderas-golf"]
    assert hits[0].distance_miles < hits[1].distance_miles < 25


@pytest.mark.asyncio
async def test_fetch_courses_keeps_requested_order(_init_db, store):
    courses = await store.fetch_courses(["maderas-golf", "balboa-park", "missing"])
    assert [c.id for c in courses] == ["maderas-golf", "balboa-park"]


@pytest.mark.asyncio
async def test_closed_courses_are_not_searched(_init_db, store):
    await db.upsert_course(BALBOA, status="closed")
    assert await store.search_courses(ExactMatchPlan(city="San Diego")) == []
    lat, lon = SAN_DIEGO_CENTER
    assert "balboa-park" not in [h.id for h in await store.find_within_radius(lat, lon, 50_000)]
    # Still reachable by ID.
    assert (await store.get_course("balboa-park")).id == "balboa-park"


@pytest.mark.asyncio
async def test_find_course_by_name(_init_db, store):
    course = await store.find_course_by_name("torrey", state="CA")
    assert course is None
    course = await store.find_course_by_name("monument", state="az")
    assert course.id == "troon-north-monument"


@pytest.mark.asyncio
async def test_purge_past_availability(_init_db):
    deleted = await db.purge_past_availability(TOMORROW)
    assert deleted > 0
    course = await db.get_course("balboa-park")
    assert [d.date for d in course.availability] == [TOMORROW]


@pytest.mark.asyncio
async def test_database_errors_become_storage_errors(tmp_path, store):
    await db.init_db(str(tmp_path / "broken.db"))
    await db.get_db().execute("DROP TABLE tee_slots")
    await db.get_db().execute("DROP TABLE courses")
    try:
        with pytest.raises(StorageError):
            await store.search_courses(ExactMatchPlan(state="CA"))
    finally:
        await db.close_db()


@pytest.mark.asyncio
async def test_closed_slot_reads_back_without_capacity(_init_db, store):
    await db.get_db().execute(
        "INSERT INTO tee_slots (course_id, date, time, available, price, players_available) "
        "VALUES ('maderas-golf', ?, '18:00', 0, 90, 3)",
        (TODAY.isoformat(),),
    )
    await db.get_db().commit()

    course = await store.get_course("maderas-golf")
    slot = next(s for s in course.availability_for(TODAY).tee_times if s.time == "18:00")
    assert slot.available is False
    assert slot.players_available == 0


@pytest.mark.asyncio
async def test_range_hours_round_trip(_init_db, store):
    await db.upsert_course(make_course("night-range", amenities=["driving_range"], range_hours={"Mon": "closed"}))
    course = await store.get_course("night-range")
    assert course.range_hours == {"mon": "closed"}


@pytest.mark.asyncio
async def test_add_availability_extends_the_tee_sheet(_init_db):
    later = TOMORROW + timedelta(days=1)
    written = await db.add_availability("balboa-park", [make_day(later, make_slot("07:30"), make_slot("08:30"))])
    assert written == 2

    course = await db.get_course("balboa-park")
    assert [d.date for d in course.availability] == [TODAY, TOMORROW, later]
    assert (await db.last_availability_dates())["balboa-park"] == later


@pytest.mark.asyncio
async def test_add_availability_replaces_existing_date(_init_db):
    await db.add_availability("balboa-park", [make_day(TOMORROW, make_slot("09:10", price=40))])
    course = await db.get_course("balboa-park")
    assert [s.time for s in course.availability_for(TOMORROW).tee_times] == ["09:10"]


@pytest.mark.asyncio
async def test_last_availability_dates_includes_courses_without_slots(_init_db):
    last = await db.last_availability_dates()
    assert last["balboa-park"] == TOMORROW
    assert last["troon-north-monument"] is None
