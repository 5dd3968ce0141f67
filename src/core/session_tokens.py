"""
Signed session tokens (HS256 JWT) for stateless authentication.

Tokens carry the user id (`sub`), issue time (`iat`) and expiry (`exp`).
Nothing is stored server-side; a token is valid until its expiry.
"""
import logging
from datetime import UTC, datetime, timedelta

import jwt

from core.config import Settings

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class SessionSigner:
    """Issues and verifies signed session tokens with a symmetric secret."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(minutes=15),
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        if expires_in <= timedelta(0):
            raise ValueError("expires_in must be positive")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_in = expires_in

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionSigner":
        """Build a signer from the process-wide settings."""
        return cls(
            secret_key=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expires_in=timedelta(minutes=settings.access_token_expire_minutes),
        )

    @property
    def expires_in(self) -> timedelta:
        """Lifetime of newly issued tokens."""
        return self._expires_in

    def issue(self, subject_id: int, now: datetime | None = None) -> str:
        """Create a signed token asserting `subject_id` until now + expires_in."""
        issued_at = now or datetime.now(UTC)
        payload = {
            "sub": str(subject_id),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._expires_in).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str, now: datetime | None = None) -> int | None:
        """
        Verify a token's signature and expiry.

        Returns:
            The subject (user) id if the token is authentic and unexpired,
            None otherwise. Malformed, foreign-signed and expired tokens are
            indistinguishable to the caller.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                # Time claims are checked below against `now` so the boundary is exact
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError:
            logger.warning("token_rejected", extra={"reason": "bad_signature"})
            return None
        except jwt.PyJWTError as e:
            logger.info("token_rejected", extra={"reason": "malformed", "error": str(e)})
            return None

        current = (now or datetime.now(UTC)).timestamp()
        exp = payload["exp"]
        if not isinstance(exp, int) or current >= exp:
            logger.info("token_rejected", extra={"reason": "expired"})
            return None

        try:
            return int(payload["sub"])
        except (TypeError, ValueError):
            logger.warning("token_rejected", extra={"reason": "bad_subject"})
            return None
