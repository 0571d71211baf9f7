"""
Main entrypoint for the Magic Wash API.

This module assembles the FastAPI application, sets up logging, CORS,
access logging and error handling, and includes the routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Importing the app here
makes it easy to run with uvicorn or another ASGI server, e.g.::

    uvicorn carwash_api.app.main:app --reload

The database handle is created here and owned by the application:
it is connected on startup, closed on shutdown and reached by the
endpoints through ``app.state.db``.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.router import router
from .core.access_log import AccessLogMiddleware
from .core.config import Settings, settings as default_settings
from .core.db import Database
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging

LOCAL_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the environment derived
        module settings.
    db : Optional[Database]
        Database handle; by default one is built from
        ``settings.database_url``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that startup can log.
    setup_logging(settings.log_level, settings.log_file or None)
    logger = logging.getLogger(__name__)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.settings = settings
    app.state.db = db or Database(settings.database_url)

    # Last added is outermost: CORS wraps the access log, so preflight
    # responses and handled 4xx errors carry CORS headers.  Unhandled
    # 500s are rendered by ServerErrorMiddleware outside CORS and do not.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_origin_regex=LOCAL_ORIGIN_REGEX if settings.debug else None,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["Content-Length", "X-Request-Id"],
        max_age=600,
    )

    register_exception_handlers(app, expose_details=not settings.is_production)
    app.include_router(router)

    @app.on_event("startup")
    async def startup_event() -> None:
        app.state.db.connect()
        logger.info(
            "%s %s starting (environment: %s)",
            settings.project_name,
            settings.api_version,
            settings.environment,
        )

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        app.state.db.close()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
