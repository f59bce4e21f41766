from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from golf_finder import db
from golf_finder.main import app
from golf_finder.mock_data import (
    extend_demo_availability,
    generate_availability,
    get_demo_courses,
    seed_demo_data,
)
from golf_finder.models import SearchFilters, SearchRequest
from golf_finder.services.registry import ServiceRegistry
from tests.mocks.models import SATURDAY, TODAY
from tests.mocks.services import StubGeocoder


@pytest.fixture()
def sqlite_registry(monkeypatch, tmp_path) -> ServiceRegistry:
    import golf_finder.config as config_mod

    monkeypatch.setattr(config_mod, "DB_PATH", str(tmp_path / "e2e.db"))
    monkeypatch.setattr(config_mod, "SEED_DEMO_DATA", True)
    monkeypatch.setattr(config_mod, "TEEFOX_API_KEY", "")

    reg = ServiceRegistry(geocoder=StubGeocoder(), today=lambda: TODAY)
    for mod_path in (
        "golf_finder.services.registry",
        "golf_finder.main",
        "golf_finder.routers.health",
        "golf_finder.routers.courses",
        "golf_finder.routers.bookings",
    ):
        monkeypatch.setattr(f"{mod_path}.registry", reg)

    from golf_finder.rate_limit import limiter as _limiter
    monkeypatch.setattr(_limiter, "enabled", False)
    return reg


@pytest.fixture()
def e2e_client(sqlite_registry) -> TestClient:
    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc


def _search(client, **body):
    resp = client.post("/api/courses/search", json=body)
    assert resp.status_code == 200, resp.text
    return resp.json()


# ── Demo catalogue ─────────────────────────────────────────────────────────


def test_demo_availability_is_deterministic():
    first = generate_availability(100, "medium", TODAY, seed="x")
    second = generate_availability(100, "medium", TODAY, seed="x")
    assert first == second
    assert [d.date for d in first] == [TODAY + timedelta(days=i) for i in range(7)]
    assert len(first[0].tee_times) == 13 * 6
    assert first[0].tee_times[0].time == "06:00"
    assert first[0].tee_times[-1].time == "18:50"


def test_demo_pricing():
    weekday = generate_availability(100, "high", TODAY, days=1, seed="p")[0].tee_times
    weekend = generate_availability(100, "high", SATURDAY, days=1, seed="p")[0].tee_times
    assert {s.price for s in weekday if s.time < "15:00"} == {100}
    assert {s.price for s in weekday if s.time >= "15:00"} == {70}
    assert {s.price for s in weekend if s.time < "15:00"} == {130}
    assert all(s.players_available == 0 for s in weekday if not s.available)
    assert all(2 <= s.players_available <= 4 for s in weekday if s.available)


@pytest.mark.asyncio
async def test_seed_only_fills_an_empty_database(tmp_path):
    await db.init_db(str(tmp_path / "seed.db"))
    try:
        assert await seed_demo_data(TODAY) == len(get_demo_courses(TODAY))
        assert await seed_demo_data(TODAY) == 0
    finally:
        await db.close_db()


@pytest.mark.asyncio
async def test_roll_forward_keeps_stored_days(tmp_path):
    await db.init_db(str(tmp_path / "roll.db"))
    try:
        await seed_demo_data(TODAY)
        before = await db.get_course("torrey-pines-south")

        later = TODAY + timedelta(days=2)
        await db.purge_past_availability(later)
        assert await extend_demo_availability(later) == len(get_demo_courses(TODAY))

        after = await db.get_course("torrey-pines-south")
        assert [d.date for d in after.availability] == [later + timedelta(days=i) for i in range(7)]
        assert after.availability_for(later) == before.availability_for(later)
        assert await extend_demo_availability(later) == 0
    finally:
        await db.close_db()


@pytest.mark.asyncio
async def test_restart_a_week_later_still_has_open_tee_times(monkeypatch, tmp_path):
    import golf_finder.config as config_mod

    monkeypatch.setattr(config_mod, "DB_PATH", str(tmp_path / "restart.db"))
    monkeypatch.setattr(config_mod, "SEED_DEMO_DATA", True)
    monkeypatch.setattr(config_mod, "TEEFOX_API_KEY", "")

    first = ServiceRegistry(geocoder=StubGeocoder(), today=lambda: TODAY)
    await first.start()
    await first.stop()

    later = TODAY + timedelta(days=8)
    second = ServiceRegistry(geocoder=StubGeocoder(), today=lambda: later)
    await second.start()
    try:
        course = await second.store.get_course("balboa-park")
        assert [d.date for d in course.availability] == [later + timedelta(days=i) for i in range(7)]

        request = SearchRequest(
            state="CA",
            date=later,
            filters=SearchFilters(include_unavailable=False, has_availability_any=True),
        )
        response = await second.search.search(request)
        assert response.courses
        assert all(c.available_on_date for c in response.courses)
    finally:
        await second.stop()


# ── Full stack over SQLite ─────────────────────────────────────────────────


def test_radius_search_over_seeded_database(e2e_client):
    data = _search(e2e_client, city="San Diego", state="CA", filters={"sort_by": "cheapest"})
    ids = [c["id"] for c in data["courses"]]
    # Carlsbad is ~28 miles out, beyond the default radius.
    assert ids == ["balboa-park", "coronado-golf", "maderas-golf", "torrey-pines-south"]
    prices = [c["average_price"] for c in data["courses"]]
    assert prices == sorted(prices)
    assert all(c["distance_miles"] <= 25 for c in data["courses"])
    assert data["summary"] == "Found 4 golf courses near San Diego, CA, sorted by cheapest first."


def test_every_result_honours_price_range(e2e_client):
    data = _search(e2e_client, state="CA", filters={"min_price": 60, "max_price": 260})
    assert data["courses"]
    assert all(60 <= c["average_price"] <= 260 for c in data["courses"])


def test_players_min_on_date_excludes_courses_without_capacity(e2e_client):
    data = _search(
        e2e_client,
        state="CA",
        relative_date="this_weekend",
        filters={"players_min": 4, "time_window": "morning"},
    )
    assert data["matched_date"] == SATURDAY.isoformat()
    for course in data["courses"]:
        assert course["available_slots_on_date"] >= 1
        assert course["earliest_time_on_date"] < "11:00"


def test_international_search_by_country(e2e_client):
    data = _search(e2e_client, country="Australia")
    assert [c["id"] for c in data["courses"]] == ["new-south-wales-golf"]


def test_search_then_book_the_earliest_slot(e2e_client):
    data = _search(
        e2e_client,
        city="Scottsdale",
        state="AZ",
        date=TODAY.isoformat(),
        filters={"sort_by": "earliest_available", "include_unavailable": False},
    )
    assert data["courses"]
    first = data["courses"][0]

    resp = e2e_client.post(
        "/api/bookings",
        json={"courseId": first["id"], "date": TODAY.isoformat(), "time": first["earliest_time_on_date"], "players": 1},
    )
    assert resp.status_code == 200
    booking = resp.json()["booking"]
    assert booking["status"] == "confirmed"
    assert booking["total_price"] == booking["price_per_player"]


def test_details_include_tee_sheet(e2e_client):
    resp = e2e_client.get("/api/courses/torrey-pines-south")
    assert resp.status_code == 200
    course = resp.json()["course"]
    assert len(course["availability"]) == 7
    assert course["availability"][0]["date"] == TODAY.isoformat()
