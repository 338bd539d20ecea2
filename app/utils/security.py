"""
Password hashing and JWT helpers.

Tokens are signed with python-jose; passwords are hashed with bcrypt.
Secrets and lifetimes come from the settings singleton.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from app.config import get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Password helpers (bcrypt direct, passlib breaks on bcrypt 4.x)
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------


def create_access_token(subject: str, extra_claims: dict[str, Any] | None = None) -> str:
    """Create a signed JWT access token for *subject*.

    The payload carries ``sub``, ``iat`` and an ``exp`` claim computed from
    ``JWT_EXPIRATION_MINUTES``, plus any *extra_claims*.

    Args:
        subject: User ID stored in the ``sub`` claim.
        extra_claims: Additional claims (e.g. ``{"email": ...}``).

    Returns:
        A compact, URL-safe JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = dict(extra_claims or {})
    payload["sub"] = subject
    payload["iat"] = now
    payload["exp"] = now + timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT access token.

    Args:
        token: A JWT produced by ``create_access_token``.

    Returns:
        The decoded payload.

    Raises:
        ValueError: If the signature is wrong, the token expired, or it
                    cannot be decoded.  Callers map this to HTTP 401.
    """
    settings = get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        logger.debug("JWT verification failed: %s", exc)
        raise ValueError("Invalid or expired token") from exc
