"""
Shared test fixtures.

Provides a FastAPI TestClient wired to:
  • an in-memory course store (no SQLite)
  • a stub geocoder (no external HTTP)
  • a fixed clock, so relative dates and tee sheets line up

The `client` fixture runs the full lifespan so startup and shutdown are
exercised too.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from golf_finder.main import app
from golf_finder.services.registry import ServiceRegistry
from tests.mocks.models import TODAY
from tests.mocks.services import MockCourseStore, StubGeocoder


# ── Fixtures ───────────────────────────────────────────────────────────────


@pytest.fixture()
def store() -> MockCourseStore:
    return MockCourseStore()


@pytest.fixture()
def geocoder() -> StubGeocoder:
    return StubGeocoder()


@pytest.fixture()
def _test_env(monkeypatch, tmp_path, store, geocoder):
    """
    Internal fixture that patches the DB path and the service registry
    so that the app lifespan runs cleanly against mock collaborators.
    """
    # ── Temp database ─────────────────────────────────────────────────
    import golf_finder.config as config_mod

    monkeypatch.setattr(config_mod, "DB_PATH", str(tmp_path / "test.db"))
    monkeypatch.setattr(config_mod, "TEEFOX_API_KEY", "")

    # ── Mock service registry ─────────────────────────────────────────
    test_registry = ServiceRegistry(store=store, geocoder=geocoder, today=lambda: TODAY)

    # Patch everywhere `registry` was imported
    for mod_path in (
        "golf_finder.services.registry",
        "golf_finder.main",
        "golf_finder.routers.health",
        "golf_finder.routers.courses",
        "golf_finder.routers.bookings",
    ):
        monkeypatch.setattr(f"{mod_path}.registry", test_registry)

    # ── Disable rate limiting in tests ────────────────────────────────
    from golf_finder.rate_limit import limiter as _limiter
    monkeypatch.setattr(_limiter, "enabled", False)

    return test_registry


@pytest.fixture()
def mock_registry(_test_env) -> ServiceRegistry:
    """Public alias for tests that reference mock_registry directly."""
    return _test_env


@pytest.fixture()
def client(_test_env: ServiceRegistry) -> TestClient:
    """
    FastAPI TestClient with mock services.

    Uses a context manager so the lifespan runs.
    """
    with TestClient(app, raise_server_exceptions=False) as tc:
        yield tc
