"""
Partnership application endpoints.

Same shape as the booking routes, with an additional ``city`` filter
on the listing.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from carwash_api.app.api.deps import get_partnership_service, require_record_admin
from carwash_api.app.schemas.common import ApiResponse, MessageResponse, PageResponse, StatusUpdate
from carwash_api.app.schemas.partnership import PartnershipRead
from carwash_api.app.services.partnership_service import PartnershipService

router = APIRouter()

staff_only = [Depends(require_record_admin)]


@router.post("", response_model=ApiResponse[PartnershipRead], status_code=status.HTTP_201_CREATED)
def create_partnership(
    payload: Dict[str, Any] = Body(...),
    partnerships: PartnershipService = Depends(get_partnership_service),
) -> ApiResponse[PartnershipRead]:
    application = partnerships.create(payload)
    return ApiResponse[PartnershipRead](
        message="Partnership application submitted successfully", data=application
    )


@router.get("", response_model=PageResponse[PartnershipRead], dependencies=staff_only)
def list_partnerships(
    status: Optional[str] = Query(None),
    city: Optional[str] = Query(None, description="Case-insensitive part of the city name"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    partnerships: PartnershipService = Depends(get_partnership_service),
) -> PageResponse[PartnershipRead]:
    result = partnerships.list(status=status, city=city, page=page, limit=limit)
    return PageResponse[PartnershipRead](
        count=result.count,
        total=result.total,
        page=result.page,
        pages=result.pages,
        limit=result.limit,
        data=result.items,
    )


@router.get("/{application_id}", response_model=ApiResponse[PartnershipRead], dependencies=staff_only)
def get_partnership(
    application_id: str = Path(...),
    partnerships: PartnershipService = Depends(get_partnership_service),
) -> ApiResponse[PartnershipRead]:
    return ApiResponse[PartnershipRead](data=partnerships.get(application_id))


@router.put("/{application_id}", response_model=ApiResponse[PartnershipRead], dependencies=staff_only)
def update_partnership(
    application_id: str = Path(...),
    body: Optional[StatusUpdate] = None,
    partnerships: PartnershipService = Depends(get_partnership_service),
) -> ApiResponse[PartnershipRead]:
    body = body or StatusUpdate()
    application = partnerships.update_status(application_id, body.status)
    return ApiResponse[PartnershipRead](
        message="Partnership application updated successfully", data=application
    )


@router.delete("/{application_id}", response_model=MessageResponse, dependencies=staff_only)
def delete_partnership(
    application_id: str = Path(...),
    partnerships: PartnershipService = Depends(get_partnership_service),
) -> MessageResponse:
    partnerships.delete(application_id)
    return MessageResponse(message="Partnership application deleted successfully")
