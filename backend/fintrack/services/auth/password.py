"""
Password hashing and verification using bcrypt.

Uses passlib with the bcrypt backend. The cost factor comes from
settings (PASSWORD_HASH_ROUNDS, default 10) so that tests can run with
the minimum of 4 while production keeps a hash time in the tens of
milliseconds.

Security considerations:
- bcrypt generates a fresh random salt on every hash
- Comparison is constant-time inside the primitive
- Hashes with a stale cost factor are flagged by needs_rehash()
"""

import logging

from passlib.context import CryptContext

from fintrack.config import settings


logger = logging.getLogger(__name__)

# "deprecated='auto'" lets needs_rehash() flag hashes from older settings
_pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)


class PasswordService:
    """
    Service for password hashing and verification.

    All methods are stateless and can be called on the class.
    """

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash a plaintext password using bcrypt.

        Args:
            password: The plaintext password to hash

        Returns:
            The bcrypt hash string (includes algorithm, cost, salt and digest)

        Example:
            >>> hashed = PasswordService.hash_password("mypassword123")
            >>> hashed.startswith("$2b$")
            True
        """
        return _pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plaintext password against a stored hash.

        A hash that passlib cannot identify (corrupted row, foreign format)
        is treated as a mismatch rather than an error.

        Args:
            plain_password: The plaintext password to verify
            hashed_password: The stored hash to compare against

        Returns:
            True if the password matches, False otherwise
        """
        try:
            return _pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Password verification against malformed hash")
            return False

    @staticmethod
    def needs_rehash(hashed_password: str) -> bool:
        """
        Check if a hash was produced with outdated parameters.

        Call after a successful login so the stored hash tracks the
        configured cost factor:

            if PasswordService.needs_rehash(user.hashed_password):
                user.hashed_password = PasswordService.hash_password(plain_password)
                db.commit()
        """
        try:
            return _pwd_context.needs_update(hashed_password)
        except (ValueError, TypeError):
            return False
