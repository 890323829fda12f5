"""
Stateless one-time passcode challenges for registration.

A challenge binds an email address to a 6-digit code for a short window
without any server-side storage:

    expires_at      = now + OTP_EXPIRE_SECONDS   (integer Unix seconds)
    signature       = HMAC-SHA256(OTP_SECRET_KEY, ["email", "code", expires_at])
    challenge_token = "signature.expires_at"

The signed payload is a compact JSON array, so no email can be shifted
into the code or expiry fields by way of a shared separator.

The code travels to the user by email; the challenge token goes back to
the client, which echoes both at registration time.

Because nothing is recorded server-side, a challenge stays valid for
every attempt until it expires. Single-use enforcement would need a
used-challenge store and is deliberately not provided here.
"""

import hashlib
import json
import logging
import secrets
import time
from dataclasses import dataclass

from itsdangerous import Signer

from fintrack.config import settings
from fintrack.services.constants import (
    OTP_CODE_DIGITS,
    OTP_CHALLENGE_SEPARATOR,
    OTP_SIGNER_SALT,
)
from fintrack.services.exceptions import InvalidOTPError, OTPExpiredError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OTPChallenge:
    """A freshly issued challenge: the code to email and the token to return."""
    code: str
    challenge_token: str
    expires_at: int


class OTPService:
    """
    Issues and verifies signed OTP challenges.

    The signer uses HMAC key derivation with SHA-256 and a dedicated salt,
    keyed by OTP_SECRET_KEY (which settings require to differ from the
    session token key).
    """

    def __init__(
        self,
        secret_key: str | None = None,
        expire_seconds: int | None = None,
    ) -> None:
        self._signer = Signer(
            secret_key or settings.otp_secret_key,
            salt=OTP_SIGNER_SALT,
            key_derivation="hmac",
            digest_method=hashlib.sha256,
        )
        self._expire_seconds = expire_seconds or settings.otp_expire_seconds

    @staticmethod
    def generate_code() -> str:
        """Return a uniformly random zero-padded numeric code."""
        return f"{secrets.randbelow(10 ** OTP_CODE_DIGITS):0{OTP_CODE_DIGITS}d}"

    @staticmethod
    def is_well_formed_code(code: str) -> bool:
        return len(code) == OTP_CODE_DIGITS and code.isascii() and code.isdigit()

    def issue(self, email: str, now: float | None = None) -> OTPChallenge:
        """
        Create a new challenge for an email address.

        Args:
            email: Address the code will be sent to
            now: Override for the current time (Unix seconds)

        Returns:
            OTPChallenge with the plaintext code and the client-held token
        """
        issued_at = int(time.time() if now is None else now)
        expires_at = issued_at + self._expire_seconds
        code = self.generate_code()

        signature = self._sign(email, code, expires_at)
        challenge_token = f"{signature}{OTP_CHALLENGE_SEPARATOR}{expires_at}"

        return OTPChallenge(
            code=code,
            challenge_token=challenge_token,
            expires_at=expires_at,
        )

    def check(
        self,
        email: str,
        code: str,
        challenge_token: str,
        now: float | None = None,
    ) -> None:
        """
        Verify a code against its challenge token.

        Raises:
            OTPExpiredError: If the challenge window has passed
            InvalidOTPError: If the code is not OTP_CODE_DIGITS digits, the
                token is malformed, or the signature does not match the
                email and code
        """
        signature, expires_at = self._parse(challenge_token)
        if not self.is_well_formed_code(code):
            raise InvalidOTPError()

        current = time.time() if now is None else now
        if current > expires_at:
            raise OTPExpiredError()

        payload = self._payload(email, code, expires_at)
        if not self._signer.verify_signature(payload, signature.encode("ascii")):
            logger.warning("OTP signature mismatch")
            raise InvalidOTPError()

    def verify(
        self,
        email: str,
        code: str,
        challenge_token: str,
        now: float | None = None,
    ) -> bool:
        """Boolean form of check()."""
        try:
            self.check(email, code, challenge_token, now=now)
        except InvalidOTPError:
            return False
        return True

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _payload(email: str, code: str, expires_at: int) -> bytes:
        return json.dumps([email, code, expires_at], separators=(",", ":")).encode("utf-8")

    def _sign(self, email: str, code: str, expires_at: int) -> str:
        return self._signer.get_signature(self._payload(email, code, expires_at)).decode("ascii")

    @staticmethod
    def _parse(challenge_token: str) -> tuple[str, int]:
        """Split a challenge token into (signature, expires_at)."""
        if not challenge_token or OTP_CHALLENGE_SEPARATOR not in challenge_token:
            raise InvalidOTPError()

        signature, _, expires_str = challenge_token.rpartition(OTP_CHALLENGE_SEPARATOR)
        if not signature or not signature.isascii():
            raise InvalidOTPError()
        if not (expires_str.isascii() and expires_str.isdigit()):
            raise InvalidOTPError()

        return signature, int(expires_str)
