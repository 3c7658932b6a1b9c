"""
Authentication Module for Vite & Gourmand
=========================================

Two authentication methods protect the API:

1. **HTTP Basic Auth (Admin)**: Used for all /api/admin/* endpoints and the
   assistant conversation inspection routes. Credentials are configured via
   environment variables (ADMIN_USERNAME, ADMIN_PASSWORD) and compared in
   constant time.

2. **Bearer session token (Customers)**: Order endpoints require the opaque
   token of a signed-in customer, sent as ``Authorization: Bearer <token>``.
   Tokens live in the ``user_sessions`` table with an expiry date. Issuing
   tokens is handled by the account portal, not by this service; the seed
   command creates one for the demo account.

Usage:
------
    from vite_gourmand.auth import get_current_user, verify_admin_credentials

    @router.post("/orders")
    def create_order(user: User = Depends(get_current_user)):
        ...

The admin dependency will:
- Return 503 if ADMIN_PASSWORD is not configured
- Return 401 with WWW-Authenticate header if credentials are invalid
- Return the username string if authentication succeeds
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBasic,
    HTTPBasicCredentials,
    HTTPBearer,
)
from sqlalchemy.orm import Session

from . import config
from .db import get_db
from .models import User, UserSession

logger = logging.getLogger(__name__)


# =============================================================================
# Security Schemes
# =============================================================================

security = HTTPBasic(realm="Vite & Gourmand Admin")
bearer_scheme = HTTPBearer(auto_error=False)


# =============================================================================
# Admin Authentication Dependency
# =============================================================================

def verify_admin_credentials(
    credentials: HTTPBasicCredentials = Depends(security),
) -> str:
    """
    Verify HTTP Basic Auth credentials for admin endpoints.

    Raises:
        HTTPException (503): If ADMIN_PASSWORD is not set.
        HTTPException (401): If credentials are invalid.
    """
    # Fail closed: if password not configured, deny all access
    if not config.ADMIN_PASSWORD:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin authentication not configured. Set ADMIN_PASSWORD environment variable.",
        )

    username_correct = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        config.ADMIN_USERNAME.encode("utf-8"),
    )
    password_correct = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        config.ADMIN_PASSWORD.encode("utf-8"),
    )

    if not (username_correct and password_correct):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


# =============================================================================
# Customer Session Dependency
# =============================================================================

def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the signed-in customer from the bearer token.

    Raises:
        HTTPException (401): Missing, unknown or expired token.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    session = (
        db.query(UserSession)
        .filter(UserSession.token == credentials.credentials)
        .first()
    )
    if session is None or _as_utc(session.expires_at) <= datetime.now(timezone.utc):
        logger.info("Rejected unknown or expired session token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired or invalid",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return session.user


def create_user_session(db: Session, user: User, ttl_days: Optional[int] = None) -> UserSession:
    """Create and persist a new bearer token for ``user``."""
    ttl = ttl_days if ttl_days is not None else config.USER_SESSION_TTL_DAYS
    session = UserSession(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        expires_at=datetime.now(timezone.utc) + timedelta(days=ttl),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session
