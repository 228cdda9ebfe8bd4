"""API Dependencies for dependency injection."""

from collections.abc import Generator
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bnusa.core.config import settings
from bnusa.db.base import SessionLocal
from bnusa.schemas.auth import AuthUser
from bnusa.services.auth import DEV_USER, AuthService
from bnusa.services.rate_limit import book_update_limiter

# Security scheme - auto_error=False allows us to handle missing auth gracefully
security = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """Get current authenticated user.

    When AUTH_DISABLED=true, returns a development user without requiring a token.
    """
    if settings.AUTH_DISABLED:
        return DEV_USER

    if not credentials:
        raise _unauthorized("Authorization header required")

    token = credentials.credentials
    if not token or token in ("undefined", "null"):
        raise _unauthorized("Invalid token format")

    user = AuthService.verify_token(token)
    if not user:
        raise _unauthorized("Invalid or expired token")
    return user


async def limit_book_updates(
    current_user: AuthUser = Depends(get_current_user),
) -> AuthUser:
    """Authenticated user, throttled by the book update limiter."""
    book_update_limiter.hit(current_user.uid)
    return current_user
