"""
Endpoint modules.

Each module defines an ``APIRouter`` for one route group (auth,
bookings, partnerships, health).  The routers are aggregated in
``api/router.py`` and then included in the main application.
"""
