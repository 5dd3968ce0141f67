"""
Password hashing with Argon2id.

Wraps argon2-cffi so the rest of the application never deals with its
exception hierarchy directly. Hashes are self-describing PHC strings
(algorithm, version, cost parameters and salt are embedded), so verification
always uses the parameters the hash was created with.
"""
import logging
from functools import cached_property, lru_cache

from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from core.config import Settings

logger = logging.getLogger(__name__)


class MalformedHashError(Exception):
    """Raised when a stored password hash cannot be parsed or verified."""

    def __init__(self, message: str = "Stored password hash is malformed") -> None:
        super().__init__(message)


class PasswordHasher:
    """Salted, memory-hard password hashing (Argon2id)."""

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        self._hasher = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        """Get the shared hasher for the configured cost parameters."""
        return _cached_hasher(
            settings.password_hash_time_cost,
            settings.password_hash_memory_cost,
            settings.password_hash_parallelism,
        )

    @cached_property
    def dummy_hash(self) -> str:
        """A valid hash of a throwaway password, for equal-cost checks of unknown users."""
        return self.hash("dummy-password-for-timing")

    def verify_dummy(self, plaintext: str) -> None:
        """Run a verification against `dummy_hash` and discard the result."""
        self.verify(self.dummy_hash, plaintext)

    def hash(self, plaintext: str) -> str:
        """
        Hash a password with a fresh random salt.

        The same plaintext produces a different value on every call.

        Raises:
            ValueError: If the password is empty.
        """
        if not plaintext:
            raise ValueError("Password must not be empty")
        return self._hasher.hash(plaintext)

    def verify(self, password_hash: str, plaintext: str) -> bool:
        """
        Check a plaintext password against a stored hash.

        Returns:
            True if the password matches, False on mismatch.

        Raises:
            MalformedHashError: If the stored hash is not a valid Argon2 record.
        """
        try:
            return self._hasher.verify(password_hash, plaintext)
        except VerifyMismatchError:
            return False
        except InvalidHashError as e:
            raise MalformedHashError() from e
        except VerificationError as e:
            # Parsed but failed for a reason other than a plain mismatch
            # (e.g. corrupted digest); treat as an unusable record.
            logger.warning("Password verification error: %s", e)
            raise MalformedHashError() from e

    def needs_rehash(self, password_hash: str) -> bool:
        """True if the hash was created with different cost parameters than configured."""
        try:
            return self._hasher.check_needs_rehash(password_hash)
        except InvalidHashError as e:
            raise MalformedHashError() from e


@lru_cache
def _cached_hasher(time_cost: int, memory_cost: int, parallelism: int) -> PasswordHasher:
    return PasswordHasher(
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
    )
