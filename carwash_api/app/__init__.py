"""
Application package initializer.

The project is organised into logical pieces: ``core`` holds
configuration, logging, errors, validation, security and the database
handle; ``schemas`` the record rule tables and response models;
``services`` the business logic; and ``api`` the HTTP routes that
expose it.
"""

from .main import app, create_app  # noqa: F401
