"""
Top-level API router.

Aggregates the route groups under their public prefixes.  When a new
group is added, include its router here.
"""

from fastapi import APIRouter

from .endpoints import auth, bookings, health, partnerships

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(auth.router, prefix="/api/auth", tags=["auth"])
router.include_router(bookings.router, prefix="/api/bookings", tags=["bookings"])
router.include_router(partnerships.router, prefix="/api/partnerships", tags=["partnerships"])
