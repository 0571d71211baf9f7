"""
Franchise partnership applications.
"""

import datetime as dt

from carwash_api.app.core.validation import EMAIL_PATTERN, FieldRule
from carwash_api.app.schemas.common import CamelModel

INVESTMENT_CAPACITIES = (
    "₹0-2 Lakhs",
    "₹2-5 Lakhs",
    "₹5-10 Lakhs",
    "₹10-15 Lakhs",
    "₹15-20 Lakhs",
    "₹20-30 Lakhs",
    "₹30+ Lakhs",
)

CALL_SCHEDULES = ("Morning (9AM-12PM)", "Afternoon (12PM-4PM)", "Evening (4PM-7PM)")

PARTNERSHIP_STATUSES = ("pending", "contacted", "approved", "rejected")

STATUS_RULE = FieldRule(
    "status",
    "status",
    "Status",
    choices=PARTNERSHIP_STATUSES,
    choice_label="application status",
    default="pending",
)

PARTNERSHIP_RULES = (
    FieldRule(
        "fullName",
        "full_name",
        "Full name",
        min_length=2,
        min_length_message="Name must be at least 2 characters",
    ),
    FieldRule(
        "email",
        "email",
        "Email",
        lowercase=True,
        pattern=EMAIL_PATTERN,
        pattern_message="Please enter a valid email address",
    ),
    FieldRule("phone", "phone", "Phone number", min_length=10),
    FieldRule("city", "city", "City", min_length=2),
    FieldRule("pincode", "pincode", "Pincode", min_length=6),
    FieldRule(
        "investmentCapacity",
        "investment_capacity",
        "Investment capacity",
        choices=INVESTMENT_CAPACITIES,
        choice_label="investment capacity",
    ),
    FieldRule("businessExperience", "business_experience", "Business experience", required=False, default=""),
    FieldRule("preferredLocation", "preferred_location", "Preferred location", min_length=3),
    FieldRule("comments", "comments", "Comments", required=False, default=""),
    FieldRule("callSchedule", "call_schedule", "Call schedule", choices=CALL_SCHEDULES, choice_label="call schedule"),
    STATUS_RULE,
)

LOGGED_FIELDS = (
    "full_name",
    "email",
    "phone",
    "city",
    "pincode",
    "investment_capacity",
    "preferred_location",
    "call_schedule",
    "business_experience",
    "comments",
)


class PartnershipRead(CamelModel):
    id: str
    full_name: str
    email: str
    phone: str
    city: str
    pincode: str
    investment_capacity: str
    business_experience: str = ""
    preferred_location: str
    comments: str = ""
    call_schedule: str
    status: str = "pending"
    submitted_at: dt.datetime
    created_at: dt.datetime
    updated_at: dt.datetime
