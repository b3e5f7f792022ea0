"""Tests for the HTTP surface."""

import json
from datetime import date

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.models.responses import ErrorCodes
from core.storage import MemoryMedium
from services.calendar import CalendarSession
from services.persistence import PersistenceBridge

DATE_KEY = "2026-10-17"


@pytest.fixture
def client(session):
    app.state.session = session
    with TestClient(app) as test_client:
        yield test_client
    app.state.session = None


def create(client, date_key=DATE_KEY, **fields):
    body = {"name": "Standup", "startTime": "09:00", "endTime": "09:30", **fields}
    return client.post(f"/v1/events/{date_key}", json=body)


class TestHealth:
    def test_healthy(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["events_stored"] == 0
        assert response.json()["storage_backend"] == "MemoryMedium"

    def test_unhealthy_after_failed_save(self):
        app.state.session = CalendarSession(
            PersistenceBridge(MemoryMedium(max_bytes=64)), today=date(2026, 10, 17)
        )
        with TestClient(app) as client:
            assert create(client, description="x" * 200).status_code == 201
            response = client.get("/health")
        app.state.session = None

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["events_stored"] == 1


class TestEvents:
    def test_create_and_list(self, client):
        response = create(client, color="#188038")
        assert response.status_code == 201
        created = response.json()
        assert created["startTime"] == "09:00"
        assert created["color"] == "#188038"
        assert created["id"]

        create(client, name="Early", startTime="07:00", endTime="08:00")
        listed = client.get(f"/v1/events/{DATE_KEY}").json()
        assert [e["name"] for e in listed] == ["Early", "Standup"]

    def test_missing_fields(self, client):
        response = create(client, name="")
        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["code"] == ErrorCodes.VALIDATION_ERROR
        assert detail["details"] == ["Missing event name"]

    def test_overlap(self, client):
        create(client)
        response = create(client, name="Call", startTime="09:15", endTime="10:00")
        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["code"] == ErrorCodes.EVENT_OVERLAP
        assert detail["details"] == ["Standup (09:00-09:30)"]

    def test_adjacent_allowed(self, client):
        create(client)
        assert create(client, name="Next", startTime="09:30", endTime="10:00").status_code == 201

    def test_bad_date(self, client):
        response = client.get("/v1/events/17-10-2026")
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == ErrorCodes.INVALID_REQUEST

    def test_delete_by_index(self, client):
        create(client)
        response = client.delete(f"/v1/events/{DATE_KEY}/0")
        assert response.status_code == 200
        assert response.json()["name"] == "Standup"
        assert client.get(f"/v1/events/{DATE_KEY}").json() == []

    def test_delete_out_of_range(self, client):
        create(client)
        response = client.delete(f"/v1/events/{DATE_KEY}/5")
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == ErrorCodes.NOT_FOUND
        assert len(client.get(f"/v1/events/{DATE_KEY}").json()) == 1

    def test_delete_by_id(self, client):
        event_id = create(client).json()["id"]
        assert client.delete(f"/v1/events/{DATE_KEY}/by-id/{event_id}").status_code == 200
        assert client.delete(f"/v1/events/{DATE_KEY}/by-id/{event_id}").status_code == 404

    def test_search(self, client):
        create(client, description="Sprint planning")
        results = client.get("/v1/search", params={"q": "sprint"}).json()
        assert [(r["date"], r["event"]["name"]) for r in results] == [(DATE_KEY, "Standup")]


class TestCalendar:
    def test_month_view(self, client):
        create(client)
        view = client.get("/v1/calendar").json()
        assert view["title"] == "October 2026"
        assert view["days_with_events"] == [17]
        assert view["today"] == 17

    def test_navigation(self, client):
        assert client.post("/v1/calendar/next").json()["title"] == "November 2026"
        assert client.post("/v1/calendar/prev").json()["title"] == "October 2026"
        assert client.get("/v1/calendar", params={"year": 2027, "month": 2}).json()["title"] == "February 2027"

    def test_bad_month(self, client):
        response = client.get("/v1/calendar", params={"year": 2026, "month": 0})
        assert response.status_code == 400

    def test_export_json(self, client):
        create(client)
        create(client, date_key="2027-01-05")

        response = client.get("/v1/export")
        assert response.status_code == 200
        assert 'filename="calendar-events-2026-10.json"' in response.headers["content-disposition"]
        assert set(json.loads(response.content)) == {DATE_KEY, "2027-01-05"}

    def test_export_xlsx(self, client):
        create(client)
        response = client.get("/v1/export", params={"format": "xlsx", "year": 2026, "month": 12})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert 'filename="calendar-events-2026-12.xlsx"' in response.headers["content-disposition"]

    def test_export_bad_month(self, client):
        response = client.get("/v1/export", params={"year": 2026, "month": 13})
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == ErrorCodes.INVALID_REQUEST

    def test_export_unknown_format(self, client):
        assert client.get("/v1/export", params={"format": "csv"}).status_code == 422
