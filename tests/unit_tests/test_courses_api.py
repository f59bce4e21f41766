"""Tests for the /api/courses endpoints."""


class TestSearchEndpoint:
    def test_city_search(self, client):
        resp = client.post("/api/courses/search", json={"city": "San Diego", "state": "CA"})
        assert resp.status_code == 200

        data = resp.json()
        assert [c["id"] for c in data["courses"]] == ["balboa-park", "maderas-golf"]
        assert data["count"] == 2
        assert data["location"] == "San Diego, CA"
        assert data["degraded_reason"] is None
        assert data["summary"].startswith("Found 2 golf courses near San Diego, CA")
        assert "availability" not in data["courses"][0]

    def test_search_with_filters_and_relative_date(self, client):
        resp = client.post(
            "/api/courses/search",
            json={
                "city": "San Diego",
                "state": "CA",
                "radius": 50,
                "relative_date": "today",
                "filters": {"players_min": 2, "sort_by": "cheapest_on_date"},
            },
        )
        assert resp.status_code == 200

        data = resp.json()
        assert data["matched_date"] == "2026-06-03"
        assert [c["id"] for c in data["courses"]] == ["balboa-park", "maderas-golf"]
        assert data["courses"][1]["cheapest_price_on_date"] == 120

    def test_unknown_filter_is_rejected(self, client):
        resp = client.post(
            "/api/courses/search",
            json={"state": "CA", "filters": {"heated_carts": True}},
        )
        assert resp.status_code == 422

    def test_missing_location_is_bad_request(self, client):
        resp = client.post("/api/courses/search", json={})
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail["error"] == "invalid_location"

    def test_state_and_country_is_bad_request(self, client):
        resp = client.post("/api/courses/search", json={"state": "CA", "country": "USA"})
        assert resp.status_code == 400

    def test_unknown_relative_date_is_bad_request(self, client):
        resp = client.post("/api/courses/search", json={"state": "CA", "relative_date": "someday"})
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "invalid_date"

    def test_radius_out_of_range(self, client):
        resp = client.post("/api/courses/search", json={"city": "San Diego", "radius": 500})
        assert resp.status_code == 422

    def test_store_outage_returns_empty_result(self, client, store):
        store.fail_all = True
        resp = client.post("/api/courses/search", json={"state": "CA"})
        assert resp.status_code == 200
        assert resp.json()["courses"] == []
        assert resp.json()["degraded_reason"].startswith("course store unavailable")


class TestCourseDetails:
    def test_get_by_id(self, client):
        resp = client.get("/api/courses/balboa-park")
        assert resp.status_code == 200

        data = resp.json()
        assert data["course"]["name"] == "Balboa Park Golf Course"
        assert len(data["course"]["availability"]) == 2
        assert data["summary"].startswith("Balboa Park Golf Course in San Diego, CA")

    def test_get_unknown_id(self, client):
        resp = client.get("/api/courses/atlantis-links")
        assert resp.status_code == 404
        assert resp.json()["detail"]["error"] == "not_found"

    def test_lookup_by_name(self, client):
        resp = client.get("/api/courses/lookup", params={"name": "aviara", "state": "CA"})
        assert resp.status_code == 200
        assert resp.json()["course"]["id"] == "aviara-golf"

    def test_lookup_by_name_not_found(self, client):
        resp = client.get("/api/courses/lookup", params={"name": "pebble"})
        assert resp.status_code == 404

    def test_lookup_requires_name(self, client):
        resp = client.get("/api/courses/lookup")
        assert resp.status_code == 422
