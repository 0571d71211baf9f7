"""Entry point for the Magic Wash API server.

Launches the FastAPI application with Uvicorn.  It is intended to be
executed from the project root, for example under Docker or a process
manager, where you only specify a single Python file to run.

Configuration such as DATABASE_URL, SECRET_KEY, FRONTEND_URL and PORT
is read from environment variables (see ``carwash_api/app/core/config.py``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from carwash_api.app.core.config import settings
from carwash_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted.

    Host and port are taken from the ``HOST`` and ``PORT`` environment
    variables.  Defaults are ``0.0.0.0`` and ``5000``.
    """
    logger = logging.getLogger("carwash_api")
    logger.info("Starting server on %s:%s (%s)", settings.host, settings.port, settings.environment)
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        # Keep uvicorn from replacing the handlers installed by setup_logging.
        log_config=None,
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
