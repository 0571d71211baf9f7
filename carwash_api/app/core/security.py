"""
Security helpers for password hashing and signed bearer tokens.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC-SHA256 signatures and base64url encoding.  Tokens embed the
admin identifier (``sub``), the issue time (``iat``) and an expiration
timestamp (``exp``).  Any change to the header or payload invalidates
the signature, so a token cannot be forged or extended without the
secret key.  Additionally, helper functions are provided for hashing
passwords using PBKDF2-HMAC with SHA-256, along with salt generation
and verification.
"""

import base64
import binascii
import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Optional

from fastapi.security import HTTPBearer

PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC-SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    data: Dict[str, Any],
    secret: str,
    expires_delta: int,
    now: Optional[float] = None,
) -> str:
    """Create a signed token with the given payload.

    The payload is extended with ``iat`` and ``exp`` fields holding
    UNIX timestamps.  A standard header with algorithm HS256 is used.
    The token is a string of the form ``header.payload.signature``,
    where each part is base64url encoded.  Clients must include this
    token in the ``Authorization`` header as ``Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": "<admin id>"}``).
    secret : str
        Key used to sign the token.
    expires_delta : int
        Lifetime of the token in seconds.
    now : Optional[float]
        Issue time, defaults to the current time.

    Returns
    -------
    str
        A signed token.
    """
    issued_at = int(now if now is not None else time.time())
    to_encode = data.copy()
    to_encode["iat"] = issued_at
    to_encode["exp"] = issued_at + int(expires_delta)
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret: str, now: Optional[float] = None) -> Optional[Dict[str, Any]]:
    """Verify and decode a token.

    Splits the token into header, payload and signature, verifies the
    HMAC signature and checks the ``exp`` field.  If validation
    succeeds, returns the payload dictionary; otherwise returns
    ``None``.  Callers do not learn why a token was rejected.
    """
    if not isinstance(token, str):
        return None
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        # Raises UnicodeEncodeError (a ValueError) for lone surrogates.
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, secret)
        actual_sig = _b64_url_decode(signature_b64)
        # Constant-time comparison to prevent timing attacks
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (binascii.Error, ValueError):
        return None
    if not isinstance(data, dict) or "exp" not in data:
        return None
    current = now if now is not None else time.time()
    try:
        if int(data["exp"]) < int(current):
            return None
    except (TypeError, ValueError):
        return None
    return data


# Shared ``Authorization: Bearer`` extractor.  ``auto_error`` is off so
# the handlers can answer with the service's own envelope.
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    A 16-byte random salt is generated for each password.  The
    resulting string contains the salt and hash separated by a
    ``$`` (salt in hex, then hash in hex).
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored salt+hash string.

    Returns ``False`` for malformed stored values and for passwords that
    cannot be encoded as UTF-8 instead of raising.
    """
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    try:
        candidate = plain_password.encode("utf-8")
    except UnicodeEncodeError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", candidate, salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
