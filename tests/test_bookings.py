from __future__ import annotations

import math

from conftest import booking_payload


def _create(client, **overrides):
    r = client.post("/api/bookings", json=booking_payload(**overrides))
    assert r.status_code == 201, r.json()
    return r.json()["data"]


def test_create_booking_returns_stored_record(client):
    r = client.post("/api/bookings", json=booking_payload(email="ASHA@Example.com"))
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Booking created successfully"
    data = body["data"]
    assert data["id"]
    assert data["email"] == "asha@example.com"
    assert data["carType"] == "sedan"
    assert data["serviceType"] == "daily-magic"
    assert data["deviceType"] == "android"
    assert data["date"] == "2026-11-02"
    for key in ("submittedAt", "createdAt", "updatedAt"):
        assert data[key]


def test_status_defaults_to_pending(client):
    payload = booking_payload()
    payload.pop("deviceType")
    payload.pop("notes")
    r = client.post("/api/bookings", json=payload)
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["status"] == "pending"
    assert data["deviceType"] == "other"
    assert data["notes"] == ""


def test_missing_fields_are_all_reported_and_nothing_is_stored(client):
    r = client.post("/api/bookings", json={"name": "Asha Verma"})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Validation error"
    assert set(body["errors"]) == {
        "Email is required",
        "Phone number is required",
        "Car type is required",
        "Service type is required",
        "Preferred date is required",
        "Service location is required",
    }
    assert client.get("/api/bookings").json()["total"] == 0


def test_non_object_body_is_a_client_error(client):
    r = client.post("/api/bookings", json=["sedan"])
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_list_filters_by_status_newest_first(client):
    first = _create(client, status="confirmed", name="First")
    _create(client, status="pending", name="Second")
    third = _create(client, status="confirmed", name="Third")

    r = client.get("/api/bookings", params={"status": "confirmed"})
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 2
    assert body["count"] == 2
    assert [b["id"] for b in body["data"]] == [third["id"], first["id"]]
    assert all(b["status"] == "confirmed" for b in body["data"])


def test_pagination(client):
    created = [_create(client, name=f"Customer {i:02d}") for i in range(25)]
    newest_first = [b["id"] for b in reversed(created)]

    r = client.get("/api/bookings", params={"page": 2, "limit": 10})
    body = r.json()
    assert body["page"] == 2
    assert body["count"] == 10
    assert body["total"] == 25
    assert body["pages"] == math.ceil(25 / 10)
    assert [b["id"] for b in body["data"]] == newest_first[10:20]

    last = client.get("/api/bookings", params={"page": 3, "limit": 10}).json()
    assert last["count"] == 5

    beyond = client.get("/api/bookings", params={"page": 9, "limit": 10}).json()
    assert beyond["count"] == 0
    assert beyond["data"] == []


def test_default_page_size_and_cap(client, settings):
    settings.default_page_size = 3
    settings.max_page_size = 4
    for i in range(6):
        _create(client, name=f"Customer {i}")

    body = client.get("/api/bookings").json()
    assert body["limit"] == 3
    assert body["count"] == 3
    assert body["pages"] == 2

    body = client.get("/api/bookings", params={"limit": 1000}).json()
    assert body["limit"] == 4
    assert body["count"] == 4
    assert body["pages"] == 2


def test_invalid_paging_parameters(client):
    assert client.get("/api/bookings", params={"page": 0}).status_code == 400
    assert client.get("/api/bookings", params={"limit": 0}).status_code == 400
    r = client.get("/api/bookings", params={"limit": "ten"})
    assert r.status_code == 400
    assert r.json()["errors"]


def test_get_booking(client):
    created = _create(client)
    r = client.get(f"/api/bookings/{created['id']}")
    assert r.status_code == 200
    assert r.json()["data"] == created

    r = client.get("/api/bookings/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Booking not found"}


def test_update_status(client):
    created = _create(client)
    r = client.put(f"/api/bookings/{created['id']}", json={"status": "completed"})
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "completed"
    assert r.json()["message"] == "Booking updated successfully"

    # Transitions are unconstrained.
    r = client.put(f"/api/bookings/{created['id']}", json={"status": "pending"})
    assert r.json()["data"]["status"] == "pending"


def test_update_rejects_unknown_status_and_keeps_record(client):
    created = _create(client)
    r = client.put(f"/api/bookings/{created['id']}", json={"status": "archived"})
    assert r.status_code == 400
    assert r.json()["errors"] == ["`archived` is not a valid booking status"]

    r = client.put(f"/api/bookings/{created['id']}", json={})
    assert r.status_code == 400

    stored = client.get(f"/api/bookings/{created['id']}").json()["data"]
    assert stored == created


def test_update_unknown_booking(client):
    r = client.put("/api/bookings/missing", json={"status": "confirmed"})
    assert r.status_code == 404


def test_delete_booking(client):
    keep = _create(client, name="Keep Me")
    doomed = _create(client, name="Delete Me")

    r = client.delete(f"/api/bookings/{doomed['id']}")
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Booking deleted successfully"}
    assert client.get(f"/api/bookings/{doomed['id']}").status_code == 404

    r = client.delete(f"/api/bookings/{doomed['id']}")
    assert r.status_code == 404
    body = client.get("/api/bookings").json()
    assert [b["id"] for b in body["data"]] == [keep["id"]]
