"""
Error types and the handlers that turn them into API responses.

Services raise the ``ApiError`` subclasses below; they never build HTTP
responses themselves.  ``register_exception_handlers`` wires the
conversion into the FastAPI application so every failure leaves the
service in the same envelope::

    {"success": false, "message": "...", "errors": [...]}

Authentication failures use the ``error`` key instead of ``message``
because the admin frontend reads it from there.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for failures that map onto a client visible status."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    # Name of the envelope key that carries the human readable text.
    message_key: str = "message"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_content(self) -> Dict[str, Any]:
        return {"success": False, self.message_key: self.message}


class ValidationFailed(ApiError):
    """One or more fields were missing, malformed or out of range."""

    def __init__(self, errors: List[str], message: str = "Validation error"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)
        self.errors = list(errors)

    def to_content(self) -> Dict[str, Any]:
        content = super().to_content()
        content["errors"] = self.errors
        return content


class BadRequest(ApiError):
    """A single malformed input, reported with the ``error`` key."""

    message_key = "error"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class AccountNotFound(NotFound):
    message_key = "error"


class AuthenticationError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message_key = "error"


class AccountLocked(AuthenticationError):
    status_code = status.HTTP_423_LOCKED


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = "Route not found"
    else:
        message = str(exc.detail) if exc.detail else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: List[str] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field_name = ".".join(location)
        text = error.get("msg", "Invalid value")
        errors.append(f"{field_name}: {text}" if field_name else text)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation error", "errors": errors},
    )


def register_exception_handlers(app: FastAPI, expose_details: bool) -> None:
    """Attach the envelope producing handlers to ``app``.

    ``expose_details`` controls whether the text of unexpected
    exceptions is included in 500 responses; it should be false in
    production.
    """

    async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content: Dict[str, Any] = {"success": False, "message": "Internal server error"}
        if expose_details:
            content["error"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
