from __future__ import annotations

import time
from datetime import timedelta

import pytest

from carwash_api.app.core.db import to_timestamp, utc_now
from carwash_api.app.core.errors import ValidationFailed
from carwash_api.app.core.security import create_access_token

from conftest import ADMIN_PASSWORD, ADMIN_USERNAME, booking_payload


def _login(client, password=ADMIN_PASSWORD, username=ADMIN_USERNAME):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def _admin_row(db):
    return db.fetchone("SELECT * FROM admins WHERE username = ?", (ADMIN_USERNAME,))


def test_login_issues_token(client, admin, settings):
    before = int(time.time())
    r = _login(client)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["username"] == ADMIN_USERNAME
    assert data["role"] == "admin"
    assert data["token"].count(".") == 2
    lifetime_ms = settings.access_token_expire_minutes * 60 * 1000
    assert before * 1000 + lifetime_ms <= data["expiryTime"] <= (before + 5) * 1000 + lifetime_ms


def test_login_requires_both_fields(client, admin):
    r = client.post("/api/auth/login", json={"username": ADMIN_USERNAME})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Username and password are required"}
    assert client.post("/api/auth/login").status_code == 400


def test_unknown_user_and_wrong_password_look_the_same(client, admin):
    unknown = _login(client, username="nobody")
    wrong = _login(client, password="not-the-password")
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"success": False, "error": "Invalid username or password"}


def test_five_failures_lock_the_account(client, admin, db):
    for _ in range(5):
        assert _login(client, password="wrong-password").status_code == 401

    r = _login(client)
    assert r.status_code == 423
    assert r.json()["error"] == "Account is locked. Try again in 120 minutes."
    assert _admin_row(db)["login_attempts"] == 5


def test_lock_expires(client, admin, db):
    for _ in range(5):
        _login(client, password="wrong-password")

    with db.transaction() as cursor:
        cursor.execute(
            "UPDATE admins SET lock_until = ? WHERE username = ?",
            (to_timestamp(utc_now() - timedelta(minutes=1)), ADMIN_USERNAME),
        )

    r = _login(client)
    assert r.status_code == 200
    row = _admin_row(db)
    assert row["login_attempts"] == 0
    assert row["lock_until"] is None
    assert row["last_login"] is not None


def test_failure_after_expired_lock_restarts_count(client, admin, db):
    for _ in range(5):
        _login(client, password="wrong-password")
    with db.transaction() as cursor:
        cursor.execute(
            "UPDATE admins SET lock_until = ? WHERE username = ?",
            (to_timestamp(utc_now() - timedelta(seconds=5)), ADMIN_USERNAME),
        )

    assert _login(client, password="wrong-password").status_code == 401
    row = _admin_row(db)
    assert row["login_attempts"] == 1
    assert row["lock_until"] is None
    assert _login(client).status_code == 200


def test_success_resets_failure_counter(client, admin, db):
    for _ in range(4):
        _login(client, password="wrong-password")
    assert _login(client).status_code == 200
    for _ in range(4):
        _login(client, password="wrong-password")
    assert _login(client).status_code == 200


def test_lockout_threshold_is_configurable(client, admin, settings):
    settings.max_login_attempts = 2
    settings.lockout_minutes = 15
    _login(client, password="wrong-password")
    _login(client, password="wrong-password")
    r = _login(client)
    assert r.status_code == 423
    assert r.json()["error"] == "Account is locked. Try again in 15 minutes."


def test_verify(client, token):
    r = client.post("/api/auth/verify", json={"token": token})
    assert r.status_code == 200
    assert r.json()["data"] == {"username": ADMIN_USERNAME, "role": "admin"}


def test_verify_failures_are_indistinguishable(client, token, db, settings, admin_service):
    assert client.post("/api/auth/verify", json={}).status_code == 400

    admin_id = _admin_row(db)["id"]
    expired = create_access_token(
        {"sub": admin_id}, settings.secret_key, 24 * 3600, now=time.time() - 25 * 3600
    )
    header, payload, signature = token.split(".")
    tampered = f"{header}.{payload}x.{signature}"
    forged = create_access_token({"sub": admin_id}, "guessed-secret", 3600)

    responses = [client.post("/api/auth/verify", json={"token": t}) for t in (expired, tampered, forged, "garbage")]

    admin_service.delete_admin(ADMIN_USERNAME)
    responses.append(client.post("/api/auth/verify", json={"token": token}))

    for r in responses:
        assert r.status_code == 401
        assert r.json() == {"success": False, "error": "Invalid or expired token"}


def test_me(client, token):
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["username"] == ADMIN_USERNAME
    assert data["email"] == "admin@magicwash.com"
    assert data["role"] == "admin"
    assert data["lastLogin"]
    assert data["createdAt"]
    assert "password" not in data


def test_me_errors(client, token, admin_service):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["error"] == "No token provided"

    r = client.get("/api/auth/me", headers={"Authorization": "Bearer nonsense"})
    assert r.status_code == 401

    admin_service.delete_admin(ADMIN_USERNAME)
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 404
    assert r.json()["error"] == "Admin not found"


def test_change_password(client, token):
    r = client.post(
        "/api/auth/change-password",
        json={"token": token, "currentPassword": ADMIN_PASSWORD, "newPassword": "sparkling-clean-42"},
    )
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Password changed successfully"}

    assert _login(client).status_code == 401
    assert _login(client, password="sparkling-clean-42").status_code == 200


def test_change_password_failures(client, token):
    def change(**body):
        return client.post("/api/auth/change-password", json=body)

    r = change(token=token, currentPassword=ADMIN_PASSWORD)
    assert r.status_code == 400
    assert r.json()["error"] == "All fields are required"

    r = change(token=token, currentPassword=ADMIN_PASSWORD, newPassword="short")
    assert r.status_code == 400
    assert r.json()["error"] == "New password must be at least 8 characters"

    r = change(token="garbage", currentPassword=ADMIN_PASSWORD, newPassword="long-enough-pass")
    assert r.status_code == 401

    r = change(token=token, currentPassword="not-my-password", newPassword="long-enough-pass")
    assert r.status_code == 401
    assert r.json()["error"] == "Current password is incorrect"

    assert _login(client).status_code == 200


def test_record_routes_can_require_a_token(client, token, settings):
    settings.protect_record_routes = True

    # Submissions stay public.
    created = client.post("/api/bookings", json=booking_payload())
    assert created.status_code == 201
    booking_id = created.json()["data"]["id"]

    r = client.get("/api/bookings")
    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "No token provided"}
    assert client.delete(f"/api/bookings/{booking_id}").status_code == 401
    assert client.get("/api/partnerships", headers={"Authorization": "Bearer nonsense"}).status_code == 401

    headers = {"Authorization": f"Bearer {token}"}
    assert client.get("/api/bookings", headers=headers).json()["total"] == 1
    r = client.put(f"/api/bookings/{booking_id}", json={"status": "confirmed"}, headers=headers)
    assert r.status_code == 200


def test_duplicate_admin_is_rejected(admin_service, admin):
    with pytest.raises(ValidationFailed) as exc_info:
        admin_service.create_admin(ADMIN_USERNAME, "another-password")
    assert exc_info.value.errors == ["Username admin already exists"]


def _post_raw(client, path, body: str):
    # Raw JSON text so "\ud800" reaches the server as an escaped lone surrogate.
    return client.post(path, content=body.encode("ascii"), headers={"Content-Type": "application/json"})


def test_lone_surrogates_are_rejected_like_bad_credentials(client, admin):
    invalid_login = {"success": False, "error": "Invalid username or password"}

    r = _post_raw(client, "/api/auth/login", '{"username": "admin", "password": "pass\\ud800word"}')
    assert r.status_code == 401
    assert r.json() == invalid_login

    r = _post_raw(client, "/api/auth/login", '{"username": "adm\\ud800in", "password": "magicwash@admin"}')
    assert r.status_code == 401
    assert r.json() == invalid_login

    # The failed password attempt above still counts towards the lockout.
    assert _admin_row(client.app.state.db)["login_attempts"] == 1


def test_lone_surrogate_token_is_invalid(client, token):
    for raw in ('"\\ud800"', '"a.\\ud800.c"', f'"{token}\\ud800"'):
        r = _post_raw(client, "/api/auth/verify", '{"token": %s}' % raw)
        assert r.status_code == 401
        assert r.json() == {"success": False, "error": "Invalid or expired token"}


def test_record_guard_ignores_other_authorization_schemes(client, token, settings):
    settings.protect_record_routes = True
    r = client.get("/api/bookings", headers={"Authorization": f"Basic {token}"})
    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "No token provided"}
    assert client.get("/api/bookings", headers={"Authorization": "Bearer "}).status_code == 401
    assert client.get("/api/bookings", headers={"Authorization": f"bearer {token}"}).status_code == 200
