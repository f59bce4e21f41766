"""
SQLite database layer using aiosqlite.

Stores golf courses and their per-day tee sheets.
Tables are created automatically on first connect.
"""

from __future__ import annotations

import json
import logging
import math
from collections import defaultdict
from datetime import date, datetime, timezone
from pathlib import Path

import aiosqlite
from pydantic import ValidationError

from golf_finder import config
from golf_finder.models import Course, DailyAvailability

logger = logging.getLogger(__name__)

_EARTH_RADIUS_M = 6_371_008.8

# ── Module-level connection ───────────────────────────────────────────────

_db: aiosqlite.Connection | None = None


async def init_db(db_path: str | None = None) -> None:
    """Open the database and create tables if they don't exist."""
    global _db
    path = Path(db_path or config.DB_PATH)
    if str(path) != ":memory:":
        path.parent.mkdir(parents=True, exist_ok=True)

    _db = await aiosqlite.connect(str(path))
    _db.row_factory = aiosqlite.Row  # dict-like rows
    await _db.execute("PRAGMA journal_mode=WAL")
    await _db.execute("PRAGMA foreign_keys=ON")
    await _db.create_function("haversine_m", 4, _haversine_m, deterministic=True)

    await _db.executescript(_SCHEMA)
    await _add_missing_columns(_db)
    await _db.commit()
    logger.info("Database initialized at %s", path)


async def close_db() -> None:
    """Close the database connection."""
    global _db
    if _db is not None:
        await _db.close()
        _db = None
        logger.info("Database connection closed")


def get_db() -> aiosqlite.Connection:
    """Return the active database connection (must call init_db first)."""
    assert _db is not None, "Database not initialized — call init_db() first"
    return _db


# ── Schema ────────────────────────────────────────────────────────────────

_SCHEMA = """
CREATE TABLE IF NOT EXISTS courses (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    status          TEXT NOT NULL DEFAULT 'open',
    city            TEXT NOT NULL,
    state           TEXT,
    country         TEXT NOT NULL,
    lat             REAL,
    lon             REAL,
    type            TEXT NOT NULL,
    holes           INTEGER NOT NULL DEFAULT 18,
    par             INTEGER NOT NULL DEFAULT 72,
    yardage         INTEGER NOT NULL DEFAULT 0,
    slope           INTEGER,
    rating          REAL,
    designer        TEXT,
    year_built      INTEGER,
    pricing_tiers   TEXT NOT NULL DEFAULT '[]',  -- JSON array of tiers
    average_price   REAL NOT NULL DEFAULT 0,
    amenities       TEXT NOT NULL DEFAULT '[]',  -- JSON array
    range_hours     TEXT,                        -- JSON object, weekday -> hours
    badges          TEXT NOT NULL DEFAULT '[]',  -- JSON array
    verified        INTEGER NOT NULL DEFAULT 0,
    rating_stars    REAL NOT NULL DEFAULT 0,
    reviews_count   INTEGER NOT NULL DEFAULT 0,
    phone           TEXT,
    email           TEXT,
    website         TEXT,
    booking_provider TEXT,
    provider_id     TEXT,
    description     TEXT,
    local_rules     TEXT,
    updated_at      TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_courses_status ON courses(status);
CREATE INDEX IF NOT EXISTS idx_courses_state ON courses(state);
CREATE INDEX IF NOT EXISTS idx_courses_country ON courses(country);

CREATE TABLE IF NOT EXISTS tee_slots (
    course_id         TEXT NOT NULL,
    date              TEXT NOT NULL,
    time              TEXT NOT NULL,
    available         INTEGER NOT NULL,
    price             REAL NOT NULL,
    players_available INTEGER NOT NULL,
    PRIMARY KEY (course_id, date, time),
    FOREIGN KEY (course_id) REFERENCES courses(id) ON DELETE CASCADE
);
"""


# ── Helpers ───────────────────────────────────────────────────────────────


def _haversine_m(lat1: float | None, lon1: float | None, lat2: float | None, lon2: float | None) -> float | None:
    """Great-circle distance in meters, or NULL when a coordinate is missing."""
    if None in (lat1, lon1, lat2, lon2):
        return None
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * _EARTH_RADIUS_M * math.asin(math.sqrt(a))


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_course(row: aiosqlite.Row, availability: list[dict]) -> Course:
    """Convert a database row plus its tee-sheet rows to a Course model."""
    return Course.model_validate(
        {
            "id": row["id"],
            "name": row["name"],
            "city": row["city"],
            "state": row["state"],
            "country": row["country"],
            "lat": row["lat"],
            "lon": row["lon"],
            "type": row["type"],
            "holes": row["holes"],
            "par": row["par"],
            "yardage": row["yardage"],
            "slope": row["slope"],
            "rating": row["rating"],
            "designer": row["designer"],
            "year_built": row["year_built"],
            "pricing_tiers": json.loads(row["pricing_tiers"]),
            "average_price": row["average_price"],
            "amenities": json.loads(row["amenities"]),
            "range_hours": json.loads(row["range_hours"]) if row["range_hours"] else None,
            "badges": json.loads(row["badges"]),
            "verified": bool(row["verified"]),
            "rating_stars": row["rating_stars"],
            "reviews_count": row["reviews_count"],
            "phone": row["phone"],
            "email": row["email"],
            "website": row["website"],
            "booking_provider": row["booking_provider"],
            "provider_id": row["provider_id"],
            "description": row["description"],
            "local_rules": row["local_rules"],
            "availability": availability,
        }
    )


async def _load_availability(course_ids: list[str]) -> dict[str, list[dict]]:
    """Tee sheets for the given courses, grouped per course and date."""
    if not course_ids:
        return {}
    db = get_db()
    placeholders = ",".join("?" for _ in course_ids)
    async with db.execute(
        f"SELECT * FROM tee_slots WHERE course_id IN ({placeholders}) "
        "ORDER BY course_id, date, time",
        course_ids,
    ) as cur:
        rows = await cur.fetchall()

    grouped: dict[str, dict[str, list[dict]]] = defaultdict(lambda: defaultdict(list))
    for r in rows:
        grouped[r["course_id"]][r["date"]].append(
            {
                "time": r["time"],
                "available": bool(r["available"]),
                "price": r["price"],
                "players_available": r["players_available"],
            }
        )
    return {
        cid: [{"date": day, "tee_times": slots} for day, slots in days.items()]
        for cid, days in grouped.items()
    }


async def _rows_to_courses(rows: list[aiosqlite.Row]) -> list[Course]:
    availability = await _load_availability([r["id"] for r in rows])
    courses: list[Course] = []
    for row in rows:
        try:
            courses.append(_row_to_course(row, availability.get(row["id"], [])))
        except ValidationError as exc:
            logger.warning("Skipping malformed course row %s: %s", row["id"], exc)
    return courses


# ══════════════════════════════════════════════════════════════════════════
#                    COURSE REPOSITORY
# ══════════════════════════════════════════════════════════════════════════


async def upsert_course(course: Course, *, status: str = "open") -> None:
    """Insert or replace a course and its whole tee sheet."""
    db = get_db()
    await db.execute(
        """
        INSERT OR REPLACE INTO courses (
            id, name, status, city, state, country, lat, lon,
            type, holes, par, yardage, slope, rating, designer, year_built,
            pricing_tiers, average_price, amenities, range_hours, badges,
            verified, rating_stars, reviews_count,
            phone, email, website, booking_provider, provider_id,
            description, local_rules, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            course.id, course.name, status,
            course.city, course.state, course.country, course.lat, course.lon,
            course.type, course.holes, course.par, course.yardage,
            course.slope, course.rating, course.designer, course.year_built,
            json.dumps([t.model_dump() for t in course.pricing_tiers]),
            course.average_price,
            json.dumps(course.amenities),
            json.dumps(course.range_hours) if course.range_hours is not None else None,
            json.dumps(course.badges),
            int(course.verified), course.rating_stars, course.reviews_count,
            course.phone, course.email, course.website,
            course.booking_provider, course.provider_id,
            course.description, course.local_rules,
            _now_iso(),
        ),
    )
    await _replace_availability(db, course.id, course.availability)
    await db.commit()


async def _replace_availability(
    db: aiosqlite.Connection,
    course_id: str,
    days: list[DailyAvailability],
) -> None:
    await db.execute("DELETE FROM tee_slots WHERE course_id = ?", (course_id,))
    await db.executemany(
        """
        INSERT INTO tee_slots (course_id, date, time, available, price, players_available)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        [
            (course_id, day.date.isoformat(), s.time, int(s.available), s.price, s.players_available)
            for day in days
            for s in day.tee_times
        ],
    )


async def count_courses() -> int:
    db = get_db()
    async with db.execute("SELECT COUNT(*) FROM courses") as cur:
        row = await cur.fetchone()
    return row[0]


async def purge_past_availability(today: date) -> int:
    """Drop tee sheets before *today*. Returns the number of deleted slots."""
    db = get_db()
    cur = await db.execute("DELETE FROM tee_slots WHERE date < ?", (today.isoformat(),))
    await db.commit()
    return cur.rowcount


async def add_availability(course_id: str, days: list[DailyAvailability]) -> int:
    """Write tee sheets for extra dates, replacing any slots already stored on them."""
    if not days:
        return 0
    db = get_db()
    await db.executemany(
        "DELETE FROM tee_slots WHERE course_id = ? AND date = ?",
        [(course_id, day.date.isoformat()) for day in days],
    )
    rows = [
        (course_id, day.date.isoformat(), s.time, int(s.available), s.price, s.players_available)
        for day in days
        for s in day.tee_times
    ]
    await db.executemany(
        """
        INSERT INTO tee_slots (course_id, date, time, available, price, players_available)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        rows,
    )
    await db.commit()
    return len(rows)


async def last_availability_dates() -> dict[str, date | None]:
    """Latest stored tee-sheet date per course (None for courses without one)."""
    db = get_db()
    async with db.execute(
        """
        SELECT c.id AS id, MAX(t.date) AS last_date
        FROM courses c LEFT JOIN tee_slots t ON t.course_id = c.id
        GROUP BY c.id
        """
    ) as cur:
        rows = await cur.fetchall()
    return {
        r["id"]: date.fromisoformat(r["last_date"]) if r["last_date"] else None
        for r in rows
    }


async def get_course(course_id: str) -> Course | None:
    """Fetch a single course by ID, whatever its status."""
    db = get_db()
    async with db.execute("SELECT * FROM courses WHERE id = ?", (course_id,)) as cur:
        row = await cur.fetchone()
    if row is None:
        return None
    courses = await _rows_to_courses([row])
    return courses[0] if courses else None


async def search_courses(
    *,
    city: str | None = None,
    state: str | None = None,
    country: str | None = None,
    limit: int = 500,
) -> list[Course]:
    """Open courses matching the location columns exactly (city by substring)."""
    db = get_db()
    sql = "SELECT * FROM courses WHERE status = 'open'"
    params: list = []

    if city:
        sql += " AND instr(lower(city), lower(?)) > 0"
        params.append(city)
    if state:
        sql += " AND upper(state) = ?"
        params.append(state.upper())
    if country:
        sql += " AND lower(country) = lower(?)"
        params.append(country)

    sql += " ORDER BY name LIMIT ?"
    params.append(limit)

    async with db.execute(sql, params) as cur:
        rows = await cur.fetchall()
    return await _rows_to_courses(rows)


async def fetch_courses(course_ids: list[str], *, limit: int = 500) -> list[Course]:
    """Open courses with the given IDs, in the order the IDs were given."""
    if not course_ids:
        return []
    db = get_db()
    placeholders = ",".join("?" for _ in course_ids)
    async with db.execute(
        f"SELECT * FROM courses WHERE status = 'open' AND id IN ({placeholders})",
        course_ids,
    ) as cur:
        rows = await cur.fetchall()

    position = {cid: i for i, cid in enumerate(course_ids)}
    rows = sorted(rows, key=lambda r: position[r["id"]])[:limit]
    return await _rows_to_courses(rows)


async def find_course_by_name(
    name: str,
    *,
    state: str | None = None,
    country: str | None = None,
) -> Course | None:
    """First open course whose name contains *name* (case-insensitive)."""
    db = get_db()
    sql = "SELECT * FROM courses WHERE status = 'open' AND instr(lower(name), lower(?)) > 0"
    params: list = [name]
    if state:
        sql += " AND upper(state) = ?"
        params.append(state.upper())
    if country:
        sql += " AND lower(country) = lower(?)"
        params.append(country)
    sql += " ORDER BY name LIMIT 1"

    async with db.execute(sql, params) as cur:
        row = await cur.fetchone()
    if row is None:
        return None
    courses = await _rows_to_courses([row])
    return courses[0] if courses else None


async def courses_within_radius(
    lat: float,
    lon: float,
    radius_meters: float,
) -> list[tuple[str, float]]:
    """(course_id, distance_meters) of open courses within the radius, nearest first."""
    db = get_db()
    async with db.execute(
        """
        SELECT id, distance FROM (
            SELECT id, haversine_m(?, ?, lat, lon) AS distance
            FROM courses
            WHERE status = 'open' AND lat IS NOT NULL AND lon IS NOT NULL
        )
        WHERE distance <= ?
        ORDER BY distance ASC
        """,
        (lat, lon, radius_meters),
    ) as cur:
        rows = await cur.fetchall()
    return [(r["id"], r["distance"]) for r in rows]
