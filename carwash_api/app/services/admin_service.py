"""
Admin accounts, login throttling and bearer tokens.

Each account moves through a small state machine::

    unlocked --(max_login_attempts consecutive failures)--> locked until T
    locked --(T elapses)--> unlocked

A successful login resets the failure counter and clears any lock.  An
attempt made after an expired lock restarts the counter at one.

Tokens are HMAC signed (see ``core.security``) and carry the account
identifier and expiry.  Verification still looks the account up so
that a token for a deleted account stops working immediately; there
is no revocation list, so a leaked token stays valid until it expires.
"""

import logging
import math
import sqlite3
from datetime import datetime, timedelta
from typing import Any, Optional

from carwash_api.app.core.config import Settings
from carwash_api.app.core.db import Database, from_timestamp, new_id, to_timestamp, utc_now
from carwash_api.app.core.errors import (
    AccountLocked,
    AccountNotFound,
    AuthenticationError,
    BadRequest,
    ValidationFailed,
)
from carwash_api.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from carwash_api.app.schemas.admin import AdminIdentity, AdminProfile, LoginResult

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
INVALID_TOKEN = "Invalid or expired token"


def _filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _encodable(value: str) -> bool:
    """False for strings SQLite cannot bind, e.g. JSON lone surrogates."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class AdminService:
    """Authentication and account management for administrators."""

    def __init__(self, db: Database, settings: Settings):
        self.db = db
        self.settings = settings

    @property
    def token_ttl_seconds(self) -> int:
        return self.settings.access_token_expire_minutes * 60

    def _get_by_username(self, username: str):
        if not _encodable(username):
            return None
        return self.db.fetchone("SELECT * FROM admins WHERE username = ?", (username.strip(),))

    def _get_by_id(self, admin_id: Any):
        if not isinstance(admin_id, str):
            return None
        return self.db.fetchone("SELECT * FROM admins WHERE id = ?", (admin_id,))

    def _profile(self, row) -> AdminProfile:
        return AdminProfile(
            username=row["username"],
            email=row["email"],
            role=row["role"],
            last_login=from_timestamp(row["last_login"]),
            created_at=from_timestamp(row["created_at"]),
        )

    # -- account management --------------------------------------------------

    def create_admin(
        self,
        username: str,
        password: str,
        email: Optional[str] = None,
        role: str = "admin",
    ) -> AdminProfile:
        """Create an account; the password is stored as a salted hash."""
        errors = []
        if not _filled(username) or not username.strip():
            errors.append("Username is required")
        if not _filled(password) or len(password) < self.settings.min_password_length:
            errors.append(f"Password must be at least {self.settings.min_password_length} characters")
        if errors:
            raise ValidationFailed(errors)

        timestamp = to_timestamp(utc_now())
        try:
            with self.db.transaction() as cursor:
                cursor.execute(
                    "INSERT INTO admins (id, username, password, email, role, created_at, updated_at) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        new_id(),
                        username.strip(),
                        hash_password(password),
                        email.strip().lower() if email else None,
                        role,
                        timestamp,
                        timestamp,
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise ValidationFailed([f"Username {username.strip()} already exists"]) from exc
        logger.info("Created admin account %s", username.strip())
        return self._profile(self._get_by_username(username))

    def get_admin(self, username: str) -> Optional[AdminProfile]:
        row = self._get_by_username(username)
        return self._profile(row) if row else None

    def set_password(self, username: str, password: str) -> None:
        """Replace an account's password and clear any lockout."""
        if not _filled(password) or len(password) < self.settings.min_password_length:
            raise ValidationFailed([f"Password must be at least {self.settings.min_password_length} characters"])
        with self.db.transaction() as cursor:
            cursor.execute(
                "UPDATE admins SET password = ?, login_attempts = 0, lock_until = NULL, updated_at = ? "
                "WHERE username = ?",
                (hash_password(password), to_timestamp(utc_now()), username.strip()),
            )
            updated = cursor.rowcount
        if not updated:
            raise AccountNotFound("Admin not found")
        logger.info("Password reset for admin: %s", username.strip())

    def delete_admin(self, username: str) -> None:
        with self.db.transaction() as cursor:
            cursor.execute("DELETE FROM admins WHERE username = ?", (username.strip(),))
            deleted = cursor.rowcount
        if not deleted:
            raise AccountNotFound("Admin not found")
        logger.info("Deleted admin account %s", username.strip())

    # -- login state machine ---------------------------------------------------

    def _register_failure(self, row, now: datetime, lock_until: Optional[datetime]) -> None:
        if lock_until is not None and lock_until <= now:
            # The previous lock has run out; start counting again.
            attempts = 1
        else:
            attempts = (row["login_attempts"] or 0) + 1
        new_lock = None
        if attempts >= self.settings.max_login_attempts:
            new_lock = to_timestamp(now + timedelta(minutes=self.settings.lockout_minutes))
            logger.warning(
                "Admin %s locked for %s minutes after %s failed logins",
                row["username"],
                self.settings.lockout_minutes,
                attempts,
            )
        with self.db.transaction() as cursor:
            cursor.execute(
                "UPDATE admins SET login_attempts = ?, lock_until = ?, updated_at = ? WHERE id = ?",
                (attempts, new_lock, to_timestamp(now), row["id"]),
            )

    def login(self, username: Any, password: Any) -> LoginResult:
        """Check credentials and issue a bearer token."""
        if not _filled(username) or not username.strip() or not _filled(password):
            raise BadRequest("Username and password are required")

        row = self._get_by_username(username)
        if row is None:
            raise AuthenticationError(INVALID_CREDENTIALS)

        now = utc_now()
        lock_until = from_timestamp(row["lock_until"])
        if lock_until is not None and lock_until > now:
            minutes = math.ceil((lock_until - now).total_seconds() / 60)
            raise AccountLocked(f"Account is locked. Try again in {minutes} minutes.")

        if not verify_password(password, row["password"]):
            self._register_failure(row, now, lock_until)
            raise AuthenticationError(INVALID_CREDENTIALS)

        with self.db.transaction() as cursor:
            cursor.execute(
                "UPDATE admins SET login_attempts = 0, lock_until = NULL, last_login = ?, updated_at = ? "
                "WHERE id = ?",
                (to_timestamp(now), to_timestamp(now), row["id"]),
            )

        token = create_access_token(
            {"sub": row["id"], "role": row["role"]},
            self.settings.secret_key,
            self.token_ttl_seconds,
            now=now.timestamp(),
        )
        logger.info("Admin login successful: %s", row["username"])
        return LoginResult(
            token=token,
            expiry_time=(int(now.timestamp()) + self.token_ttl_seconds) * 1000,
            username=row["username"],
            role=row["role"],
        )

    # -- tokens ------------------------------------------------------------------

    def _account_for_token(self, token: Any):
        """Return the claims and the account row, or ``(claims, None)``.

        Raises ``AuthenticationError`` when the token itself is malformed,
        tampered with or expired.
        """
        claims = decode_access_token(token, self.settings.secret_key) if _filled(token) else None
        if claims is None:
            raise AuthenticationError(INVALID_TOKEN)
        return claims, self._get_by_id(claims.get("sub"))

    def authenticate_token(self, token: Any) -> AdminIdentity:
        """Resolve a token to its account; every failure is the same 401."""
        _, row = self._account_for_token(token)
        if row is None:
            raise AuthenticationError(INVALID_TOKEN)
        return AdminIdentity(username=row["username"], role=row["role"])

    def verify(self, token: Any) -> AdminIdentity:
        if not _filled(token):
            raise BadRequest("Token is required")
        return self.authenticate_token(token)

    def profile(self, token: Any) -> AdminProfile:
        _, row = self._account_for_token(token)
        if row is None:
            raise AccountNotFound("Admin not found")
        return self._profile(row)

    def change_password(self, token: Any, current_password: Any, new_password: Any) -> None:
        if not (_filled(token) and _filled(current_password) and _filled(new_password)):
            raise BadRequest("All fields are required")
        if len(new_password) < self.settings.min_password_length:
            raise BadRequest(f"New password must be at least {self.settings.min_password_length} characters")

        _, row = self._account_for_token(token)
        if row is None:
            raise AuthenticationError(INVALID_TOKEN)
        if not verify_password(current_password, row["password"]):
            raise AuthenticationError("Current password is incorrect")

        with self.db.transaction() as cursor:
            cursor.execute(
                "UPDATE admins SET password = ?, updated_at = ? WHERE id = ?",
                (hash_password(new_password), to_timestamp(utc_now()), row["id"]),
            )
        logger.info("Password changed for admin: %s", row["username"])
