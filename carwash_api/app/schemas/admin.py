"""
Pydantic models for admin authentication.

Request bodies are deliberately permissive (every field optional) so the
handlers can answer missing fields with the service's own messages
instead of framework validation errors.  The password hash never
appears in any read model.
"""

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, Field

from carwash_api.app.schemas.common import CamelModel


class LoginRequest(BaseModel):
    username: Optional[Any] = Field(None, examples=["admin"])
    password: Optional[Any] = Field(None, examples=["magicwash@admin"])


class TokenRequest(BaseModel):
    token: Optional[Any] = None


class ChangePasswordRequest(CamelModel):
    token: Optional[Any] = None
    current_password: Optional[Any] = None
    new_password: Optional[Any] = None


class LoginResult(CamelModel):
    token: str
    # Expiry as UNIX epoch milliseconds.
    expiry_time: int
    username: str
    role: str


class AdminIdentity(CamelModel):
    username: str
    role: str


class AdminProfile(CamelModel):
    username: str
    email: Optional[str] = None
    role: str
    last_login: Optional[dt.datetime] = None
    created_at: dt.datetime
