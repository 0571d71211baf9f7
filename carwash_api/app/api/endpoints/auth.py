"""
Admin authentication endpoints.

``/login`` exchanges a username and password for a signed bearer
token, ``/verify`` checks a token sent in the body, ``/me`` returns the
account behind the ``Authorization`` header and ``/change-password``
replaces the stored password hash.  Failures are reported with the
``error`` key of the response envelope.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from carwash_api.app.api.deps import get_admin_service, get_bearer_token
from carwash_api.app.schemas.admin import (
    AdminIdentity,
    AdminProfile,
    ChangePasswordRequest,
    LoginRequest,
    LoginResult,
    TokenRequest,
)
from carwash_api.app.schemas.common import ApiResponse, MessageResponse
from carwash_api.app.services.admin_service import AdminService

router = APIRouter()


@router.post("/login", response_model=ApiResponse[LoginResult])
def login(body: Optional[LoginRequest] = None, admins: AdminService = Depends(get_admin_service)) -> ApiResponse[LoginResult]:
    """Log in; repeated failures lock the account for a while."""
    body = body or LoginRequest()
    return ApiResponse[LoginResult](data=admins.login(body.username, body.password))


@router.post("/verify", response_model=ApiResponse[AdminIdentity])
def verify(body: Optional[TokenRequest] = None, admins: AdminService = Depends(get_admin_service)) -> ApiResponse[AdminIdentity]:
    body = body or TokenRequest()
    return ApiResponse[AdminIdentity](data=admins.verify(body.token))


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: Optional[ChangePasswordRequest] = None, admins: AdminService = Depends(get_admin_service)
) -> MessageResponse:
    """Replace the password of the account the token belongs to.

    The current password must be supplied as well, so a stolen token
    alone cannot be used to take over the account.
    """
    body = body or ChangePasswordRequest()
    admins.change_password(body.token, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.get("/me", response_model=ApiResponse[AdminProfile])
def me(
    token: str = Depends(get_bearer_token), admins: AdminService = Depends(get_admin_service)
) -> ApiResponse[AdminProfile]:
    return ApiResponse[AdminProfile](data=admins.profile(token))
