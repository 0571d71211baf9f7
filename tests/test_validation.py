from __future__ import annotations

from carwash_api.app.core.validation import validate_choice, validate_record
from carwash_api.app.schemas.booking import BOOKING_RULES, STATUS_RULE
from carwash_api.app.schemas.partnership import PARTNERSHIP_RULES

from conftest import booking_payload, partnership_payload


def test_valid_booking_is_cleaned():
    clean, errors = validate_record(
        BOOKING_RULES,
        booking_payload(email="  Asha@Example.COM ", name="  Asha  ", notes=None, deviceType=None),
    )
    assert errors == []
    assert clean["email"] == "asha@example.com"
    assert clean["name"] == "Asha"
    assert clean["notes"] == ""
    assert clean["device_type"] == "other"
    assert clean["status"] == "pending"
    assert clean["car_type"] == "sedan"


def test_every_missing_field_is_reported():
    _, errors = validate_record(BOOKING_RULES, {})
    assert errors == [
        "Name is required",
        "Email is required",
        "Phone number is required",
        "Car type is required",
        "Service type is required",
        "Preferred date is required",
        "Service location is required",
    ]


def test_violations_of_different_kinds_are_collected_together():
    _, errors = validate_record(
        BOOKING_RULES,
        booking_payload(name="A", email="not-an-email", phone="12345", carType="truck", address="x"),
    )
    assert "Name must be at least 2 characters" in errors
    assert "Please enter a valid email address" in errors
    assert "Phone number must be at least 10 characters" in errors
    assert "`truck` is not a valid car type" in errors
    assert "Address must be at least 5 characters" in errors
    assert len(errors) == 5


def test_date_accepts_timestamps_and_rejects_garbage():
    clean, errors = validate_record(BOOKING_RULES, booking_payload(date="2026-11-02T09:30:00.000Z"))
    assert errors == []
    assert clean["date"] == "2026-11-02"

    _, errors = validate_record(BOOKING_RULES, booking_payload(date="next tuesday"))
    assert errors == ["Preferred date must be a valid date"]


def test_non_object_payload_is_rejected():
    clean, errors = validate_record(BOOKING_RULES, ["not", "a", "dict"])
    assert clean == {}
    assert errors == ["Request body must be a JSON object"]


def test_unknown_keys_are_ignored():
    clean, errors = validate_record(BOOKING_RULES, booking_payload(isAdmin=True, id="forced"))
    assert errors == []
    assert "isAdmin" not in clean
    assert "id" not in clean


def test_partnership_rules():
    clean, errors = validate_record(PARTNERSHIP_RULES, partnership_payload())
    assert errors == []
    assert clean["investment_capacity"] == "₹5-10 Lakhs"
    assert clean["comments"] == ""

    _, errors = validate_record(
        PARTNERSHIP_RULES,
        partnership_payload(pincode="4000", preferredLocation="AB", callSchedule="Night", investmentCapacity="lots"),
    )
    assert "Pincode must be at least 6 characters" in errors
    assert "Preferred location must be at least 3 characters" in errors
    assert "`Night` is not a valid call schedule" in errors
    assert "`lots` is not a valid investment capacity" in errors


def test_validate_choice():
    assert validate_choice(STATUS_RULE, "confirmed") is None
    assert validate_choice(STATUS_RULE, "archived") == "`archived` is not a valid booking status"
    assert validate_choice(STATUS_RULE, None) == "Status is required"
    assert validate_choice(STATUS_RULE, 3) == "`3` is not a valid booking status"
