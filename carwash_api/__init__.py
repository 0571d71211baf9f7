"""
Top-level package for the Magic Wash car wash API.

All functionality lives in submodules under ``app``: the FastAPI
application (``app.main``), its routers (``app.api``), services,
schemas and the core configuration, logging, security and storage
helpers.
"""

__all__ = []
