"""Tests for the REST API."""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api.server import create_app
from src.utils.exceptions import StorageError

REGISTRATION = {
    "fullName": "Jane Doe",
    "email": "jane@x.com",
    "role": "Engineer",
    "ticketType": "VIP",
}


@pytest.fixture
def client(registry):
    with TestClient(create_app(registry)) as test_client:
        yield test_client


def register(client, **overrides):
    body = dict(REGISTRATION, **overrides)
    response = client.post("/api/register", json=body)
    assert response.status_code == 201
    return response.json()["data"]


class TestRegister:

    def test_register_returns_created_record(self, client):
        response = client.post("/api/register", json=REGISTRATION)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "success"
        assert body["data"]["fullName"] == "Jane Doe"
        assert body["data"]["status"] == "Registered"
        assert body["data"]["checkInTime"] is None
        assert body["data"]["aiPersona"] == "Engineer Voyager"

    def test_client_supplied_id_and_status_are_ignored(self, client):
        data = register(client, id="MINE", status="Checked In", checkInTime="2025-01-01T00:00:00Z")

        assert data["id"] != "MINE"
        assert data["status"] == "Registered"
        assert data["checkInTime"] is None

    def test_missing_field(self, client):
        body = dict(REGISTRATION)
        del body["email"]

        assert client.post("/api/register", json=body).status_code == 422

    def test_blank_field(self, client):
        response = client.post("/api/register", json=dict(REGISTRATION, role="   "))

        assert response.status_code == 422
        assert "role is required" in response.json()["detail"]

    def test_unknown_ticket_type(self, client):
        assert client.post("/api/register", json=dict(REGISTRATION, ticketType="Backstage")).status_code == 422


class TestListAttendees:

    def test_lists_in_registration_order(self, client):
        first = register(client, fullName="Jane")
        second = register(client, fullName="Ana")

        data = client.get("/api/attendees").json()["data"]

        assert [a["id"] for a in data] == [first["id"], second["id"]]

    def test_status_filter(self, client):
        jane = register(client, fullName="Jane")
        register(client, fullName="Ana")
        client.post("/api/checkin", json={"id": jane["id"]})

        data = client.get("/api/attendees", params={"status": "Checked In"}).json()["data"]

        assert [a["id"] for a in data] == [jane["id"]]

    def test_invalid_status_filter(self, client):
        assert client.get("/api/attendees", params={"status": "Lost"}).status_code == 422


class TestCheckIn:

    def test_successful_check_in(self, client):
        attendee = register(client)

        response = client.post("/api/checkin", json={"id": attendee["id"].lower()})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "Checked In"
        assert data["checkInTime"] is not None

    def test_client_check_in_time_is_ignored(self, client):
        attendee = register(client)

        response = client.post("/api/checkin", json={"id": attendee["id"], "checkInTime": "1999-01-01T00:00:00Z"})

        assert response.json()["data"]["checkInTime"] != "1999-01-01T00:00:00Z"

    def test_second_check_in_conflicts(self, client):
        attendee = register(client)
        first = client.post("/api/checkin", json={"id": attendee["id"]}).json()["data"]

        response = client.post("/api/checkin", json={"id": attendee["id"]})

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "Already checked in"
        assert body["attendee"]["checkInTime"] == first["checkInTime"]

    def test_unknown_id(self, client):
        response = client.post("/api/checkin", json={"id": "NOPE"})

        assert response.status_code == 404
        assert response.json() == {"error": "Attendee not found"}


class TestQrAndHealth:

    def test_qr_png(self, client):
        attendee = register(client)

        response = client.get(f"/api/attendees/{attendee['id']}/qr")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")

    def test_qr_unknown(self, client):
        assert client.get("/api/attendees/NOPE/qr").status_code == 404

    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok"}


def test_storage_failure_returns_503():
    registry = MagicMock()
    registry.list.side_effect = StorageError("disk gone")

    with TestClient(create_app(registry)) as client:
        response = client.get("/api/attendees")

    assert response.status_code == 503
    assert response.json() == {"error": "Attendee store unavailable"}
