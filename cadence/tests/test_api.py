"""Tests for the HTTP surface: auth, calendar, day detail and health."""

from __future__ import annotations

from fastapi.testclient import TestClient

from cadence.calendar.dates import week_start
from cadence.tests.conftest import TEST_USER_ID, make_token


class TestAuth:
    def test_missing_token(self, client: TestClient) -> None:
        resp = client.get("/api/v1/calendar")
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Missing or invalid Authorization header"}

    def test_expired_token(self, client: TestClient) -> None:
        token = make_token(expires_in=-60)
        resp = client.get("/api/v1/calendar", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Token expired"}

    def test_wrong_audience(self, client: TestClient) -> None:
        token = make_token(aud="anon")
        resp = client.get("/api/v1/calendar", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Invalid token"}

    def test_health_is_public(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        # No pool outside the lifespan
        assert body["database"] == "unreachable"
        assert body["status"] == "degraded"
        assert body["calendar_config"] == "1.0"


class TestCalendar:
    def test_month_view(self, client: TestClient, auth_headers, record_store, utc_today) -> None:
        resp = client.get("/api/v1/calendar?tz=UTC", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()

        assert body["granularity"] == "month"
        assert body["layout"] == "desktop"
        assert body["today"] == utc_today.isoformat()
        assert body["selected_date"] == utc_today.isoformat()
        assert body["carousel_index"] is None
        assert body["load_error"] is None
        assert len(body["month_options"]) == 12

        cell = next(c for c in body["days"] if c["day"]["key"] == utc_today.isoformat())
        assert cell["phase_color"] == "luteal"
        assert cell["shown_indicators"] == ["mood_positive", "supplement"]
        assert cell["day"]["is_today"] is True

        assert body["supplement_adherence"] == "1/7"

        user_id, *_ = record_store.get_phase_forecasts.await_args.args
        assert user_id == TEST_USER_ID

    def test_compact_week(self, client: TestClient, auth_headers, utc_today) -> None:
        resp = client.get("/api/v1/calendar?tz=UTC&layout=compact", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["granularity"] == "week"
        assert len(body["days"]) == 7
        assert body["range_start"] == week_start(utc_today).isoformat()
        assert body["carousel_index"] == (utc_today - week_start(utc_today)).days

    def test_anchor_and_selection(self, client: TestClient, auth_headers) -> None:
        resp = client.get(
            "/api/v1/calendar?tz=UTC&granularity=twoWeek&anchor=2024-03-12&selected=2024-03-20",
            headers=auth_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["range_start"] == "2024-03-10"
        assert body["range_end"] == "2024-03-23"
        assert body["selected_date"] == "2024-03-20"
        assert body["label"] == "Mar 10 - Mar 23"
        assert len(body["weeks"]) == 6

    def test_partial_failure_still_renders(
        self, client: TestClient, auth_headers, record_store, utc_today
    ) -> None:
        record_store.get_training_logs.side_effect = RuntimeError("training_logs timeout")
        resp = client.get("/api/v1/calendar?tz=UTC", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["load_error"] == "Couldn't load calendar data"
        assert body["failed_sources"] == ["training_logs"]
        cell = next(c for c in body["days"] if c["day"]["key"] == utc_today.isoformat())
        assert cell["phase_color"] == "luteal"

    def test_bad_anchor(self, client: TestClient, auth_headers) -> None:
        resp = client.get("/api/v1/calendar?anchor=03/12/2024", headers=auth_headers)
        assert resp.status_code == 422

    def test_bad_granularity(self, client: TestClient, auth_headers) -> None:
        resp = client.get("/api/v1/calendar?granularity=year", headers=auth_headers)
        assert resp.status_code == 422

    def test_unknown_timezone(self, client: TestClient, auth_headers) -> None:
        resp = client.get("/api/v1/calendar?tz=Mars/Olympus_Mons", headers=auth_headers)
        assert resp.status_code == 422


class TestDayDetail:
    def test_day_detail(self, client: TestClient, auth_headers, utc_today) -> None:
        resp = client.get(f"/api/v1/calendar/{utc_today.isoformat()}?tz=UTC", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["cell"]["day"]["key"] == utc_today.isoformat()
        assert body["cramps_label"] == "Moderate"
        assert body["active_symptoms"] == ["headache"]
        assert body["indicator_count"] == 2

    def test_impossible_date(self, client: TestClient, auth_headers) -> None:
        resp = client.get("/api/v1/calendar/2023-02-29", headers=auth_headers)
        assert resp.status_code == 422

    def test_detail_reports_load_error(self, client: TestClient, auth_headers, record_store) -> None:
        record_store.get_symptom_logs.side_effect = RuntimeError("down")
        resp = client.get("/api/v1/calendar/2024-03-04?tz=UTC", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["load_error"] == "Couldn't load calendar data"
