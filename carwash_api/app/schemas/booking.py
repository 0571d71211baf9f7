"""
Booking records submitted from the public booking form.

The rule table drives validation of incoming submissions; ``BookingRead``
is the shape returned by the API.  Bookings are independent records with
no references to other collections.
"""

import datetime as dt

from carwash_api.app.core.validation import DATE, EMAIL_PATTERN, FieldRule
from carwash_api.app.schemas.common import CamelModel

CAR_TYPES = ("sedan", "suv", "hatchback", "luxury")

SERVICE_TYPES = (
    "daily-magic",
    "daily-magic-luxe",
    "daily-magic-royal",
    "weekly-magic",
    "weekly-magic-luxe",
    "weekly-magic-royal",
    "alternate-magic",
    "alternate-magic-luxe",
    "alternate-magic-royal",
)

DEVICE_TYPES = ("ios", "android", "other")

BOOKING_STATUSES = ("pending", "confirmed", "completed", "cancelled")

STATUS_RULE = FieldRule(
    "status",
    "status",
    "Status",
    choices=BOOKING_STATUSES,
    choice_label="booking status",
    default="pending",
)

BOOKING_RULES = (
    FieldRule("name", "name", "Name", min_length=2),
    FieldRule(
        "email",
        "email",
        "Email",
        lowercase=True,
        pattern=EMAIL_PATTERN,
        pattern_message="Please enter a valid email address",
    ),
    FieldRule(
        "phone",
        "phone",
        "Phone number",
        min_length=10,
        min_length_message="Phone number must be at least 10 characters",
    ),
    FieldRule("carType", "car_type", "Car type", choices=CAR_TYPES, choice_label="car type"),
    FieldRule("serviceType", "service_type", "Service type", choices=SERVICE_TYPES, choice_label="service type"),
    FieldRule("date", "date", "Preferred date", kind=DATE),
    FieldRule(
        "address",
        "address",
        "Service location",
        min_length=5,
        min_length_message="Address must be at least 5 characters",
    ),
    FieldRule("notes", "notes", "Notes", required=False, default=""),
    FieldRule("deviceType", "device_type", "Device type", choices=DEVICE_TYPES, choice_label="device type", default="other"),
    STATUS_RULE,
)

# Fields echoed to the log when a booking arrives.
LOGGED_FIELDS = ("name", "email", "phone", "car_type", "service_type", "date", "address", "device_type", "notes")


class BookingRead(CamelModel):
    id: str
    name: str
    email: str
    phone: str
    car_type: str
    service_type: str
    date: dt.date
    address: str
    notes: str = ""
    device_type: str = "other"
    status: str = "pending"
    submitted_at: dt.datetime
    created_at: dt.datetime
    updated_at: dt.datetime
