"""
Service layer for signup and signin.

Operations return tagged outcomes: either a result object or an `AuthError`
member. Expected denials (duplicate email, bad credentials) are values the
caller branches on; anything unexpected (database down, hashing failure)
propagates as an exception and surfaces as an internal error.
"""
import logging
from dataclasses import dataclass
from enum import StrEnum

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.passwords import MalformedHashError, PasswordHasher
from core.session_tokens import SessionSigner
from models.user import User
from services import user_service

logger = logging.getLogger(__name__)


class AuthError(StrEnum):
    """Expected, client-facing failure kinds of the auth flow."""

    CREDENTIALS_TAKEN = "credentials_taken"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass
class SignupResult:
    """A newly registered user and a token for them."""

    user: User
    access_token: str


@dataclass
class SigninResult:
    """A token for an authenticated user."""

    access_token: str
    user: User


class AuthService:
    """
    Orchestrates password hashing, credential storage and token issuance.

    Collaborators are passed in explicitly; one instance is built per request.
    Argon2 work runs in the threadpool so it never stalls the event loop.
    """

    def __init__(
        self,
        db: AsyncSession,
        hasher: PasswordHasher,
        signer: SessionSigner,
    ) -> None:
        self.db = db
        self.hasher = hasher
        self.signer = signer

    async def signup(self, email: str, password: str) -> SignupResult | AuthError:
        """
        Register a new user and issue a token for them.

        Returns AuthError.CREDENTIALS_TAKEN if the store rejects the insert on
        its uniqueness constraint. The insert runs in a SAVEPOINT so the
        request's transaction stays usable after a conflict.

        Note: Uses flush(), not commit. Session generator handles commit at request end.
        """
        password_hash = await run_in_threadpool(self.hasher.hash, password)

        try:
            async with self.db.begin_nested():
                user = await user_service.create_user(self.db, email, password_hash)
        except IntegrityError:
            logger.info("signup_conflict")
            return AuthError.CREDENTIALS_TAKEN

        logger.info("signup_succeeded", extra={"user_id": user.id})
        return SignupResult(user=user, access_token=self.signer.issue(user.id))

    async def signin(self, email: str, password: str) -> SigninResult | AuthError:
        """
        Verify credentials and issue a token.

        Unknown email, wrong password and an unreadable stored hash all return
        AuthError.INVALID_CREDENTIALS so responses cannot be used to discover
        which emails are registered.
        """
        user = await user_service.get_user_by_email(self.db, email)

        if user is None:
            # Spend the same hashing work as a real check so response timing
            # does not reveal whether the email exists.
            await run_in_threadpool(self.hasher.verify_dummy, password)
            logger.info("signin_failed", extra={"reason": "unknown_email"})
            return AuthError.INVALID_CREDENTIALS

        try:
            matches = await run_in_threadpool(self.hasher.verify, user.password_hash, password)
        except MalformedHashError:
            logger.error("signin_failed", extra={"reason": "malformed_hash", "user_id": user.id})
            return AuthError.INVALID_CREDENTIALS

        if not matches:
            logger.info("signin_failed", extra={"reason": "wrong_password", "user_id": user.id})
            return AuthError.INVALID_CREDENTIALS

        if self.hasher.needs_rehash(user.password_hash):
            new_hash = await run_in_threadpool(self.hasher.hash, password)
            await user_service.update_password_hash(self.db, user, new_hash)
            logger.info("password_rehashed", extra={"user_id": user.id})

        return SigninResult(access_token=self.signer.issue(user.id), user=user)

