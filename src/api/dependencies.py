"""FastAPI dependencies for injection."""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import (
    get_current_user,
    get_current_user_id,
    get_password_hasher,
    get_session_signer,
)
from core.config import get_settings
from core.passwords import PasswordHasher
from core.session_tokens import SessionSigner
from db.session import get_async_session
from services.auth_service import AuthService


def get_auth_service(
    db: AsyncSession = Depends(get_async_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: SessionSigner = Depends(get_session_signer),
) -> AuthService:
    """Build the auth service for this request from its collaborators."""
    return AuthService(db=db, hasher=hasher, signer=signer)


__all__ = [
    "get_async_session",
    "get_auth_service",
    "get_current_user",
    "get_current_user_id",
    "get_password_hasher",
    "get_session_signer",
    "get_settings",
]
