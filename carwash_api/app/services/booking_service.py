"""
Business logic for car wash bookings.

Bookings are created from the public booking form and managed by
staff.  All behaviour is inherited from ``RecordService``; this module
only binds it to the ``bookings`` table and the booking rule table.
"""

from carwash_api.app.schemas.booking import BOOKING_RULES, LOGGED_FIELDS, STATUS_RULE, BookingRead
from carwash_api.app.services.record_service import RecordService


class BookingService(RecordService[BookingRead]):
    """Service for managing bookings."""

    table = "bookings"
    noun = "booking"
    rules = BOOKING_RULES
    status_rule = STATUS_RULE
    read_model = BookingRead
    logged_fields = LOGGED_FIELDS
