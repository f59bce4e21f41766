"""Tests for the /api/bookings endpoint."""


class TestBookingEndpoint:
    def test_confirmed_booking(self, client):
        resp = client.post(
            "/api/bookings",
            json={"courseId": "balboa-park", "date": "2026-06-03", "time": "07:00", "players": 4},
        )
        assert resp.status_code == 200

        booking = resp.json()["booking"]
        assert booking["status"] == "confirmed"
        assert booking["total_price"] == 232
        assert booking["booking_link"].startswith("https://www.chronogolf.com/club/balboa-park-golf-course?")
        assert resp.json()["summary"] == booking["message"]

    def test_players_default_to_two(self, client):
        resp = client.post(
            "/api/bookings",
            json={"courseId": "balboa-park", "date": "2026-06-03", "time": "12:00"},
        )
        booking = resp.json()["booking"]
        assert booking["players"] == 2
        assert booking["status"] == "confirmed"

    def test_rejected_booking_is_still_ok(self, client):
        resp = client.post(
            "/api/bookings",
            json={"courseId": "balboa-park", "date": "2026-06-03", "time": "16:00", "players": 2},
        )
        assert resp.status_code == 200
        assert resp.json()["booking"]["reason"] == "time_slot_unavailable"

    def test_unconfirmed_booking(self, client):
        resp = client.post("/api/bookings", json={"course_id": "maderas-golf"})
        assert resp.status_code == 200
        booking = resp.json()["booking"]
        assert booking["status"] == "unconfirmed"
        assert booking["booking_link"]

    def test_unknown_course_is_not_found(self, client):
        resp = client.post("/api/bookings", json={"courseId": "atlantis-links"})
        assert resp.status_code == 404
        assert resp.json()["detail"]["details"] == {"course_id": "atlantis-links"}

    def test_too_many_players(self, client):
        resp = client.post("/api/bookings", json={"courseId": "balboa-park", "players": 5})
        assert resp.status_code == 422

    def test_bad_time_format(self, client):
        resp = client.post("/api/bookings", json={"courseId": "balboa-park", "time": "7am"})
        assert resp.status_code == 422
