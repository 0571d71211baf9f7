"""
Liveness and welcome endpoints.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from carwash_api.app.api.deps import get_settings
from carwash_api.app.core.config import Settings
from carwash_api.app.core.db import Database, get_db

router = APIRouter()


@router.get("/api/health")
def health(settings: Settings = Depends(get_settings), db: Database = Depends(get_db)) -> Dict[str, Any]:
    return {
        "success": True,
        "message": f"{settings.project_name} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if db.connected else "disconnected",
        "environment": settings.environment,
    }


@router.get("/")
def root(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "success": True,
        "message": f"Welcome to {settings.project_name}",
        "version": settings.api_version,
        "endpoints": {
            "auth": "/api/auth",
            "bookings": "/api/bookings",
            "partnerships": "/api/partnerships",
            "health": "/api/health",
        },
    }
