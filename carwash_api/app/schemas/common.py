"""
Response envelopes shared by every endpoint.

All responses carry ``success`` plus optional ``data``, ``message``,
``error`` and ``errors`` keys.  Listing endpoints extend the envelope
with pagination counters.
"""

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for read models exposed with camelCase keys."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class PageResponse(BaseModel, Generic[T]):
    success: bool = True
    count: int
    total: int
    page: int
    pages: int
    limit: int
    data: List[T]


class StatusUpdate(BaseModel):
    # Left untyped so an out-of-range value is reported by the record's
    # own status rule.
    status: Optional[Any] = None
