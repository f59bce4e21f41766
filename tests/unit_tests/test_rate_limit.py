"""Tests for rate limiting behaviour."""

import pytest
from fastapi.testclient import TestClient

from golf_finder.main import app


class TestRateLimiting:
    """Verify that rate limiting kicks in for the search endpoint."""

    @pytest.fixture()
    def limited_client(self, _test_env):
        """
        TestClient with rate limiting **enabled** (unlike the default
        `client` fixture which disables it for convenience).
        """
        from golf_finder.rate_limit import limiter

        limiter.enabled = True
        # Reset in-memory state so previous tests don't pollute counts
        limiter.reset()

        with TestClient(app, raise_server_exceptions=False) as tc:
            yield tc

        limiter.enabled = False

    def test_search_rate_limit(self, limited_client):
        """POST /api/courses/search is limited to 30 requests/minute."""
        for i in range(30):
            resp = limited_client.post("/api/courses/search", json={"state": "AZ"})
            assert resp.status_code == 200, f"Request {i + 1} should succeed"

        # 31st request should be rate-limited
        resp = limited_client.post("/api/courses/search", json={"state": "AZ"})
        assert resp.status_code == 429
        assert "Rate limit exceeded" in resp.text

    def test_general_endpoint_not_limited_at_low_volume(self, limited_client):
        """GET /api/health at low volume should not be rate-limited."""
        for _ in range(10):
            resp = limited_client.get("/api/health")
            assert resp.status_code == 200
