"""
SQLite document store and simple migration system.

``Database`` is an explicitly constructed handle around a single
SQLite connection.  The application creates one at startup
(``connect``), stores it on ``app.state.db`` and closes it at shutdown
(``close``); route handlers receive it through the ``get_db``
dependency.  Each collection (bookings, partnership applications,
admin accounts) lives in its own table and every write touches exactly
one row, so single statement atomicity is all the service relies on.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from fastapi import Request

logger = logging.getLogger(__name__)

MEMORY_URL = ":memory:"

MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: initial collections
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS bookings (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            phone TEXT NOT NULL,
            car_type TEXT NOT NULL,
            service_type TEXT NOT NULL,
            date TEXT NOT NULL,
            address TEXT NOT NULL,
            notes TEXT NOT NULL DEFAULT '',
            device_type TEXT NOT NULL DEFAULT 'other',
            status TEXT NOT NULL DEFAULT 'pending',
            submitted_at TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS partnerships (
            id TEXT PRIMARY KEY,
            full_name TEXT NOT NULL,
            email TEXT NOT NULL,
            phone TEXT NOT NULL,
            city TEXT NOT NULL,
            pincode TEXT NOT NULL,
            investment_capacity TEXT NOT NULL,
            business_experience TEXT NOT NULL DEFAULT '',
            preferred_location TEXT NOT NULL,
            comments TEXT NOT NULL DEFAULT '',
            call_schedule TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending',
            submitted_at TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS admins (
            id TEXT PRIMARY KEY,
            username TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            email TEXT,
            role TEXT NOT NULL DEFAULT 'admin',
            login_attempts INTEGER NOT NULL DEFAULT 0,
            lock_until TEXT,
            last_login TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: indices used by the listing endpoints
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_bookings_email_submitted ON bookings(email, submitted_at);
        CREATE INDEX IF NOT EXISTS idx_bookings_status ON bookings(status);
        CREATE INDEX IF NOT EXISTS idx_partnerships_email_submitted ON partnerships(email, submitted_at);
        CREATE INDEX IF NOT EXISTS idx_partnerships_status ON partnerships(status);
        CREATE INDEX IF NOT EXISTS idx_partnerships_city ON partnerships(city);
        """,
    ),
]


def new_id() -> str:
    """Server assigned record identifier."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_timestamp(value: datetime) -> str:
    """Serialise a timestamp for storage; ISO strings sort chronologically."""
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if isinstance(value, str) else value


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths and ``:memory:`` are returned as is; relative paths
    are resolved against the project root.
    """
    if database_url == MEMORY_URL or os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


class Database:
    """Connection handle with explicit ``connect``/``close`` lifecycle."""

    def __init__(self, database_url: str):
        self.path = resolve_database_path(database_url)
        self._conn: Optional[sqlite3.Connection] = None
        # Serialises writes coming from the threadpool used by the test
        # client and sync dependencies.
        self._lock = threading.RLock()

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> "Database":
        """Open the connection and apply pending migrations.

        Calling ``connect`` on an already connected handle is a no-op.
        """
        if self._conn is not None:
            return self
        conn = sqlite3.connect(self.path, check_same_thread=False)
        # Return rows as dict-like objects keyed by column name
        conn.row_factory = sqlite3.Row
        # SQLite's LOWER() only folds ASCII; city names are not always ASCII.
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        self._conn = conn
        self.migrate()
        logger.info("Connected to database %s", self.path)
        return self

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Database connection closed")

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor; commit on success, roll back on error."""
        conn = self.connection
        with self._lock:
            cursor = conn.cursor()
            try:
                yield cursor
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    def fetchone(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        with self._lock:
            return self.connection.execute(query, params).fetchone()

    def fetchall(self, query: str, params: tuple = ()) -> List[sqlite3.Row]:
        with self._lock:
            return self.connection.execute(query, params).fetchall()

    def migrate(self) -> int:
        """Apply migrations newer than the stored version.

        Returns the schema version after migrating.
        """
        with self.transaction() as cursor:
            cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
            cursor.execute("SELECT MAX(version) AS version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version <= current_version:
                continue
            # executescript commits implicitly, so each migration is
            # recorded right after its statements run.
            with self._lock:
                self.connection.executescript(sql)
            with self.transaction() as cursor:
                cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            logger.info("Applied migration %s", version)
            current_version = version
        return current_version


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the application's database handle."""
    return request.app.state.db
