"""
Application configuration from environment variables.

All settings have sensible defaults for local development.
A .env file in the project root is loaded automatically (if present).
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file before reading any env vars
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# ── Environment ───────────────────────────────────────────────────────────

ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

# ── Paths ─────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# SQLite database file
DB_PATH: str = os.getenv("DB_PATH", str(DATA_DIR / "golf_finder.db"))

# Load the demo course catalogue into an empty database on startup.
SEED_DEMO_DATA: bool = os.getenv("SEED_DEMO_DATA", "true").lower() == "true"

# Upper bound on storage queries; a slow store yields an empty result.
STORAGE_TIMEOUT_SECONDS: float = float(os.getenv("STORAGE_TIMEOUT_SECONDS", "5"))

# ── Geocoding (Mapbox) ────────────────────────────────────────────────────

MAPBOX_TOKEN: str = os.getenv("MAPBOX_TOKEN", "")
MAPBOX_GEOCODING_URL: str = os.getenv(
    "MAPBOX_GEOCODING_URL",
    "https://api.mapbox.com/geocoding/v5/mapbox.places",
)
GEOCODE_TIMEOUT_SECONDS: float = float(os.getenv("GEOCODE_TIMEOUT_SECONDS", "5"))


def geocoding_enabled() -> bool:
    """True when a Mapbox token is configured.

    Without a token every lookup resolves to "not found" and location
    searches fall back to exact matching.
    """
    return bool(MAPBOX_TOKEN)


# ── Search ────────────────────────────────────────────────────────────────

# Radius applied to city searches when the caller does not pass one.
DEFAULT_CITY_RADIUS_MILES: float = float(os.getenv("DEFAULT_CITY_RADIUS_MILES", "25"))

# Hard cap on the number of courses returned by a single search.
MAX_RESULTS: int = int(os.getenv("MAX_RESULTS", "100"))

METERS_PER_MILE: float = 1609.34

# ── Booking ───────────────────────────────────────────────────────────────

# Base for booking links when a course has neither a provider nor a website.
BOOKING_FALLBACK_URL: str = os.getenv(
    "BOOKING_FALLBACK_URL", "https://golf-finder.app/book"
)

# ── Live tee sheets (TeeFox) ──────────────────────────────────────────────

# Courses booked through teefox/teebox get their tee sheet from the
# provider when a key is configured; otherwise the stored sheet is used.
TEEFOX_API_KEY: str = os.getenv("TEEFOX_API_KEY", "")
TEEFOX_API_URL: str = os.getenv("TEEFOX_API_URL", "https://api.teefox.golf/api/teetimes")
TEEFOX_TIMEOUT_SECONDS: float = float(os.getenv("TEEFOX_TIMEOUT_SECONDS", "10"))


def live_tee_times_enabled() -> bool:
    return bool(TEEFOX_API_KEY)
