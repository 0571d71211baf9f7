"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts out of the box in development.  In a production
deployment you should at least override ``SECRET_KEY``,
``DATABASE_URL`` and ``FRONTEND_URL``.

Settings are passed down explicitly: ``create_app`` accepts a
``Settings`` instance and stores it on ``app.state.settings``.  The
module level ``settings`` object is only the default used when no
instance is supplied.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Magic Wash API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    # ``NODE_ENV`` is honoured so existing deployment manifests keep working.
    environment: str = field(
        default_factory=lambda: os.getenv("ENVIRONMENT", os.getenv("NODE_ENV", "development"))
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 5000))

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by ``core.db``; ``:memory:`` is accepted
    # for throwaway instances.
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "carwash.db"))

    # Origin of the public booking site.  Additional origins may be given
    # as a comma separated list in ``CORS_ORIGINS``.
    frontend_url: str = field(default_factory=lambda: os.getenv("FRONTEND_URL", "http://localhost:5173"))
    extra_origins: str = field(default_factory=lambda: os.getenv("CORS_ORIGINS", ""))

    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", "change_me"))
    access_token_expire_minutes: int = field(
        default_factory=lambda: _env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24)
    )

    # Login throttling: after ``max_login_attempts`` consecutive failures
    # the account is locked for ``lockout_minutes``.
    max_login_attempts: int = field(default_factory=lambda: _env_int("MAX_LOGIN_ATTEMPTS", 5))
    lockout_minutes: int = field(default_factory=lambda: _env_int("LOCKOUT_MINUTES", 120))
    min_password_length: int = field(default_factory=lambda: _env_int("MIN_PASSWORD_LENGTH", 8))

    default_page_size: int = field(default_factory=lambda: _env_int("DEFAULT_PAGE_SIZE", 50))
    max_page_size: int = field(default_factory=lambda: _env_int("MAX_PAGE_SIZE", 100))

    # When enabled, listing, reading, updating and deleting bookings and
    # partnership applications requires an admin bearer token.  Public
    # submissions are never protected.
    protect_record_routes: bool = field(default_factory=lambda: _env_bool("PROTECT_RECORD_ROUTES"))

    @classmethod
    def from_env(cls) -> "Settings":
        """Build a fresh instance from the current environment."""
        return cls()

    @property
    def debug(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def allowed_origins(self) -> List[str]:
        origins = {
            "http://localhost:5173",
            "http://localhost:4173",
        }
        for value in [self.frontend_url, *self.extra_origins.split(",")]:
            value = value.strip().rstrip("/")
            if value:
                origins.add(value)
        return sorted(origins)


# Default instance for ``create_app`` and ``run.py``.  Because the
# dataclass computes values at instantiation time, environment variables
# should be set before importing this module.
settings = Settings()
