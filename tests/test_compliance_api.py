"""Tests for the compliance API router."""

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from digsafe.compliance.calendar import HolidayRegistry
from digsafe.core.config import CalendarConfig, Settings
from digsafe.web.app import create_app


@pytest.fixture
def settings(holidays_path):
    return Settings(calendar=CalendarConfig(holidays_path=str(holidays_path), jurisdiction="MN"))


@pytest.fixture
def app(settings):
    return create_app(settings=settings)


@pytest.fixture
def client(app):
    return TestClient(app)


class TestHealth:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["jurisdiction"] == "MN"


class TestDeadlineEndpoints:
    def test_normal_ticket(self, client):
        resp = client.post("/api/compliance/deadlines", json={
            "ticket_id": "t-1",
            "filed_at": "2025-07-03T10:00:00",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["ticket_id"] == "t-1"
        assert data["locate_ready_at"] == "2025-07-09T00:01:00"
        assert data["expires_at"] == "2025-07-17T10:00:00"
        assert data["excavation_earliest_at"] is None
        assert data["legal_start_at"] == "2025-07-09T00:01:00"

    def test_jurisdiction_override(self, client):
        # WI has Tue 2025-06-03 as a holiday; MN does not
        body = {"filed_at": "2025-06-02T10:00:00"}
        default = client.post("/api/compliance/deadlines", json=body).json()
        wi = client.post("/api/compliance/deadlines", json={**body, "jurisdiction": "WI"}).json()
        assert default["locate_ready_at"] == "2025-06-05T00:01:00"
        assert wi["locate_ready_at"] == "2025-06-06T00:01:00"

    def test_unknown_jurisdiction(self, client):
        resp = client.post("/api/compliance/deadlines", json={
            "filed_at": "2025-06-02T10:00:00",
            "jurisdiction": "ZZ",
        })
        assert resp.status_code == 404

    def test_missing_filed_at(self, client):
        resp = client.post("/api/compliance/deadlines", json={"ticket_id": "t-1"})
        assert resp.status_code == 422

    def test_meet_ticket_with_mixed_awareness(self, client):
        resp = client.post("/api/compliance/deadlines", json={
            "ticket_type": "meet",
            "filed_at": "2025-06-02T10:00:00Z",
            "meet_held_at": "2025-06-05T13:30:00",
        })
        assert resp.status_code == 422
        assert "all timezone-aware or all naive" in resp.text

    def test_meet_ticket_all_aware(self, client):
        resp = client.post("/api/compliance/deadlines", json={
            "ticket_type": "meet",
            "filed_at": "2025-06-02T15:00:00Z",
            "meet_held_at": "2025-06-05T18:30:00Z",
        })
        assert resp.status_code == 200
        data = resp.json()
        # Converted to America/Chicago (CDT, UTC-5)
        assert data["locate_ready_at"] == "2025-06-05T00:01:00-05:00"
        assert data["excavation_earliest_at"] == "2025-06-09T13:30:00-05:00"
        assert data["legal_start_at"] == "2025-06-09T13:30:00-05:00"

    def test_meet_ticket(self, client):
        resp = client.post("/api/compliance/deadlines", json={
            "ticket_type": "meet",
            "filed_at": "2025-06-02T10:00:00",
            "meet_held_at": "2025-06-05T13:30:00",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["excavation_earliest_at"] == "2025-06-09T13:30:00"
        assert data["legal_start_at"] == "2025-06-09T13:30:00"


class TestExcavationEarliestEndpoint:
    def test_after_meet(self, client):
        resp = client.post("/api/compliance/excavation-earliest", json={
            "ticket_id": "t-3",
            "filed_at": "2025-06-02T10:00:00",
            "meet_held_at": "2025-06-06T14:00:00",
        })
        assert resp.status_code == 200
        assert resp.json() == {
            "ticket_id": "t-3",
            "excavation_earliest_at": "2025-06-10T14:00:00",
        }

    def test_before_meet_is_conflict(self, client):
        resp = client.post("/api/compliance/excavation-earliest", json={
            "ticket_id": "t-4",
            "ticket_type": "meet",
            "filed_at": "2025-06-02T10:00:00",
        })
        assert resp.status_code == 409
        assert "meet_held_at" in resp.json()["detail"]


class TestReadinessEndpoint:
    def test_ready(self, client):
        resp = client.post("/api/compliance/readiness", json={"responses": [
            {"utility_name": "Xcel Energy", "status": "Marked"},
            {"utility_name": "CenterPoint", "status": "Clear"},
        ]})
        assert resp.status_code == 200
        data = resp.json()
        assert data["verdict"] == "ready"
        assert data["banner"] == "Ready to Dig"

    def test_conflict(self, client):
        resp = client.post("/api/compliance/readiness", json={"responses": [
            {"utility_name": "Xcel Energy", "status": "Marked"},
            {"utility_name": "Lumen", "status": "Conflict", "response_date": "2025-06-04T09:15:00"},
        ]})
        data = resp.json()
        assert data["verdict"] == "conflict"
        assert data["conflicting_utilities"] == ["Lumen"]

    def test_empty(self, client):
        resp = client.post("/api/compliance/readiness", json={"responses": []})
        assert resp.json()["verdict"] == "pending"

    def test_invalid_status(self, client):
        resp = client.post("/api/compliance/readiness", json={"responses": [
            {"utility_name": "Xcel Energy", "status": "Probably fine"},
        ]})
        assert resp.status_code == 422


class TestExpirationEndpoint:
    def test_sweep(self, client):
        resp = client.post("/api/compliance/expirations", json={
            "now": "2025-06-15T08:00:00",
            "tickets": [
                {"ticket_id": "a", "ticket_number": "251530001", "filed_at": "2025-06-10T08:00:00"},
                {"ticket_id": "b", "filed_at": "2025-05-20T08:00:00"},
            ],
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["processed"] == 2
        states = {n["ticket_id"]: n["state"] for n in data["notices"]}
        assert states == {"a": "active", "b": "expired"}
        assert data["notices"][0]["ticket_number"] == "251530001"

    def test_mixed_naive_and_aware(self, client):
        resp = client.post("/api/compliance/expirations", json={
            "now": "2025-06-15T08:00:00Z",
            "tickets": [{"filed_at": "2025-06-10T08:00:00"}],
        })
        assert resp.status_code == 422

    def test_mixed_awareness_within_ticket(self, client):
        resp = client.post("/api/compliance/expirations", json={
            "now": "2025-06-15T08:00:00",
            "tickets": [{"filed_at": "2025-06-10T08:00:00", "work_to_begin_at": "2025-06-11T07:00:00Z"}],
        })
        assert resp.status_code == 422


class TestHolidayEndpoint:
    def test_default_jurisdiction(self, client):
        resp = client.get("/api/compliance/holidays")
        assert resp.status_code == 200
        data = resp.json()
        assert data["jurisdiction"] == "MN"
        assert data["name"] == "Minnesota"
        assert data["years"] == [2025, 2026]
        assert {"day": "2025-07-04", "name": "Independence Day"} in data["holidays"]

    def test_filter_by_year(self, client):
        data = client.get("/api/compliance/holidays", params={"year": 2026}).json()
        assert [h["day"] for h in data["holidays"]] == ["2026-01-01"]

    def test_other_jurisdiction(self, client):
        data = client.get("/api/compliance/holidays", params={"jurisdiction": "WI"}).json()
        assert data["jurisdiction"] == "WI"

    def test_unknown_jurisdiction(self, client):
        resp = client.get("/api/compliance/holidays", params={"jurisdiction": "ZZ"})
        assert resp.status_code == 404


class TestMissingServices:
    def test_503_without_clock(self, app):
        del app.state.clock_service
        client = TestClient(app)
        resp = client.post("/api/compliance/readiness", json={"responses": []})
        assert resp.status_code == 503


def test_create_app_with_registry(holidays_path):
    registry = HolidayRegistry(config_path=holidays_path)
    app = create_app(settings=Settings(), holiday_registry=registry)
    assert app.state.holiday_registry is registry
    assert app.state.clock_service.calendar.is_holiday(date(2025, 7, 4))
