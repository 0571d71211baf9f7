"""
Logging setup shared by the API server and the admin scripts.

Everything logs through the standard ``logging`` module with one line
format.  Handlers are attached to the root logger once; later calls
(a second ``create_app`` in the test suite, ``seed_admin`` running
after an import of the app) leave the existing configuration alone.
Uvicorn's per-request logger is silenced because ``AccessLogMiddleware``
already writes one line per request.
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers whose INFO output duplicates ours.
QUIET_LOGGERS = ("uvicorn.access",)


def _handlers(logfile: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        path = Path(logfile).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Attach console (and optional file) handlers to the root logger.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"warning"``; unknown names
        fall back to INFO.
    logfile : Optional[str]
        Also write to this file.  Missing parent directories are
        created.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in _handlers(logfile):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
