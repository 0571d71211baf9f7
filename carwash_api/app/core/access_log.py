"""
Access log middleware.

Writes one line per request with the method, path, response status
and duration.  Request bodies are never logged here; submission
handlers log the fields they consider safe.
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log every request handled by the application."""

    def __init__(self, app, exclude_paths: set[str] | None = None):
        super().__init__(app)
        self._exclude = exclude_paths or set()
        self._log = logging.getLogger("carwash_api.access")

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path in self._exclude:
            return await call_next(request)

        start = time.perf_counter()
        method = request.method.upper()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000.0
            self._log.exception("%s %s failed after %.2fms", method, path, duration_ms)
            raise
        duration_ms = (time.perf_counter() - start) * 1000.0
        self._log.info("%s %s %s %.2fms", method, path, response.status_code, duration_ms)
        return response
