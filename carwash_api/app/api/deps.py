"""
FastAPI dependencies shared by the endpoint modules.

Services are built per request from the database handle and settings
stored on ``app.state`` by ``create_app``; nothing here reads global
state.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials

from carwash_api.app.core.config import Settings
from carwash_api.app.core.db import Database, get_db
from carwash_api.app.core.errors import AuthenticationError
from carwash_api.app.core.security import bearer_scheme
from carwash_api.app.schemas.admin import AdminIdentity
from carwash_api.app.services.admin_service import AdminService
from carwash_api.app.services.booking_service import BookingService
from carwash_api.app.services.partnership_service import PartnershipService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_admin_service(
    db: Database = Depends(get_db), settings: Settings = Depends(get_settings)
) -> AdminService:
    return AdminService(db, settings)


def get_booking_service(
    db: Database = Depends(get_db), settings: Settings = Depends(get_settings)
) -> BookingService:
    return BookingService(db, settings)


def get_partnership_service(
    db: Database = Depends(get_db), settings: Settings = Depends(get_settings)
) -> PartnershipService:
    return PartnershipService(db, settings)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Return the bearer token or fail with ``No token provided``."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided")
    return credentials.credentials


def require_record_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    admins: AdminService = Depends(get_admin_service),
) -> Optional[AdminIdentity]:
    """Guard for the staff-facing record routes.

    Does nothing unless ``protect_record_routes`` is enabled; then a
    valid admin bearer token is required.
    """
    if not settings.protect_record_routes:
        return None
    return admins.authenticate_token(get_bearer_token(credentials))
