"""
Authentication business logic.

Provides:
- ``authenticate_user`` — credential verification against the DB.
- ``get_current_user`` — FastAPI dependency that resolves the Bearer JWT
  to the acting ``User``.  Every budget and project endpoint depends on it
  to obtain the acting user's ID.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.utils.security import verify_password, verify_token

logger = logging.getLogger(__name__)

# ``tokenUrl`` must match the login endpoint path (relative to root).
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Verify e-mail/password credentials against the database.

    Returns ``None`` instead of raising so the router controls the HTTP
    error.  Unknown users, inactive accounts and wrong passwords are not
    distinguished.

    Args:
        db: Active SQLAlchemy session.
        email: Login e-mail submitted by the client.
        password: Plain-text password submitted by the client.

    Returns:
        The ``User`` on success, otherwise ``None``.
    """
    user: User | None = (
        db.query(User)
        .filter(User.email == email, User.active.is_(True))
        .first()
    )
    if user is None:
        logger.debug("authenticate_user: unknown or inactive user '%s'", email)
        return None

    if not verify_password(password, user.password_hash):
        logger.debug("authenticate_user: wrong password for '%s'", email)
        return None

    # Last-login stamp is best-effort
    try:
        user.last_login_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError:  # pragma: no cover
        db.rollback()
        logger.warning("Could not update last_login_at for '%s'", email)

    return user


def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Resolve the caller's identity from the ``Authorization: Bearer`` JWT.

    Raises:
        HTTPException 401: If the token is missing, invalid or expired, or
                           the user no longer exists or is inactive.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = verify_token(token)
    except ValueError:
        raise credentials_exception

    user_id: str | None = payload.get("sub")
    if not user_id:
        raise credentials_exception

    user: User | None = (
        db.query(User)
        .filter(User.id == user_id, User.active.is_(True))
        .first()
    )
    if user is None:
        raise credentials_exception

    return user
