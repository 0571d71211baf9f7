from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from carwash_api.app.core.config import Settings
from carwash_api.app.core.db import Database
from carwash_api.app.main import create_app
from carwash_api.app.services.admin_service import AdminService

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "magicwash@admin"


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings()
    s.database_url = str(tmp_path / "carwash-test.db")
    s.environment = "test"
    s.secret_key = "unit-test-secret"
    s.protect_record_routes = False
    s.max_login_attempts = 5
    s.lockout_minutes = 120
    s.access_token_expire_minutes = 60 * 24
    s.default_page_size = 50
    s.max_page_size = 100
    return s


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # Entering the context runs the startup hook, which connects the database.
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app, client) -> Database:
    return app.state.db


@pytest.fixture
def admin_service(db, settings) -> AdminService:
    return AdminService(db, settings)


@pytest.fixture
def admin(admin_service):
    return admin_service.create_admin(ADMIN_USERNAME, ADMIN_PASSWORD, email="Admin@MagicWash.com")


@pytest.fixture
def token(client, admin) -> str:
    r = client.post("/api/auth/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return r.json()["data"]["token"]


def booking_payload(**overrides):
    payload = {
        "name": "Asha Verma",
        "email": "asha@example.com",
        "phone": "9876543210",
        "carType": "sedan",
        "serviceType": "daily-magic",
        "date": "2026-11-02",
        "address": "12 MG Road, Pune",
        "notes": "Gate code 4411",
        "deviceType": "android",
    }
    payload.update(overrides)
    return payload


def partnership_payload(**overrides):
    payload = {
        "fullName": "Rohan Mehta",
        "email": "rohan@example.com",
        "phone": "9123456780",
        "city": "Mumbai",
        "pincode": "400001",
        "investmentCapacity": "₹5-10 Lakhs",
        "businessExperience": "Runs two service stations",
        "preferredLocation": "Andheri West",
        "comments": "",
        "callSchedule": "Morning (9AM-12PM)",
    }
    payload.update(overrides)
    return payload
