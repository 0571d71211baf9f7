"""
Booking endpoints.

``POST /`` is the public booking form.  The remaining routes are used
by staff to review bookings and move them through their status values;
they require an admin token when ``PROTECT_RECORD_ROUTES`` is set.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from carwash_api.app.api.deps import get_booking_service, require_record_admin
from carwash_api.app.schemas.booking import BookingRead
from carwash_api.app.schemas.common import ApiResponse, MessageResponse, PageResponse, StatusUpdate
from carwash_api.app.services.booking_service import BookingService

router = APIRouter()

staff_only = [Depends(require_record_admin)]


@router.post("", response_model=ApiResponse[BookingRead], status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: Dict[str, Any] = Body(...),
    bookings: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingRead]:
    """Submit a booking.

    Every invalid field is reported in ``errors``; ``status`` defaults
    to ``pending`` and ``deviceType`` to ``other``.
    """
    booking = bookings.create(payload)
    return ApiResponse[BookingRead](message="Booking created successfully", data=booking)


@router.get("", response_model=PageResponse[BookingRead], dependencies=staff_only)
def list_bookings(
    status: Optional[str] = Query(None, description="Only bookings with this status"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, description="Page size, capped by MAX_PAGE_SIZE"),
    bookings: BookingService = Depends(get_booking_service),
) -> PageResponse[BookingRead]:
    """List bookings, newest submission first."""
    result = bookings.list(status=status, page=page, limit=limit)
    return PageResponse[BookingRead](
        count=result.count,
        total=result.total,
        page=result.page,
        pages=result.pages,
        limit=result.limit,
        data=result.items,
    )


@router.get("/{booking_id}", response_model=ApiResponse[BookingRead], dependencies=staff_only)
def get_booking(
    booking_id: str = Path(..., description="ID of the booking"),
    bookings: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingRead]:
    return ApiResponse[BookingRead](data=bookings.get(booking_id))


@router.put("/{booking_id}", response_model=ApiResponse[BookingRead], dependencies=staff_only)
def update_booking(
    booking_id: str = Path(..., description="ID of the booking"),
    body: Optional[StatusUpdate] = None,
    bookings: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingRead]:
    """Change the status of a booking; only ``status`` can be updated."""
    body = body or StatusUpdate()
    booking = bookings.update_status(booking_id, body.status)
    return ApiResponse[BookingRead](message="Booking updated successfully", data=booking)


@router.delete("/{booking_id}", response_model=MessageResponse, dependencies=staff_only)
def delete_booking(
    booking_id: str = Path(..., description="ID of the booking"),
    bookings: BookingService = Depends(get_booking_service),
) -> MessageResponse:
    bookings.delete(booking_id)
    return MessageResponse(message="Booking deleted successfully")
