"""Access guard: bearer token validation for protected routes."""
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.passwords import PasswordHasher
from core.session_tokens import SessionSigner
from db.session import get_async_session
from models.user import User
from services import user_service

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme. auto_error=False so a missing header yields our own
# 401 (HTTPBearer's default is 403).
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_session_signer(settings: Settings = Depends(get_settings)) -> SessionSigner:
    """Dependency that builds the token signer from the process-wide settings."""
    return SessionSigner.from_settings(settings)


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    """Dependency that returns the password hasher for the configured cost parameters."""
    return PasswordHasher.from_settings(settings)


async def get_current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    signer: SessionSigner = Depends(get_session_signer),
) -> int:
    """
    Dependency that verifies the bearer token and returns the subject (user) id.

    Fails closed: a missing header, a non-bearer scheme, a malformed token, a
    bad signature and an expired token all raise 401 before the route runs.
    The id is also stored on `request.state.user_id` for downstream use.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user_id = signer.verify(credentials.credentials)
    if user_id is None:
        raise _unauthorized("Invalid or expired token")

    request.state.user_id = user_id
    return user_id


async def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """
    Dependency that validates the token and returns the current user.

    A valid token for a user that no longer exists is rejected with 401.
    """
    user = await user_service.get_user_by_id(db, user_id)
    if user is None:
        logger.warning("token_rejected", extra={"reason": "unknown_subject", "user_id": user_id})
        raise _unauthorized("Invalid or expired token")
    return user
