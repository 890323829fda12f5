"""
Google Sign-In identity verification.

The frontend obtains a Google ID token (the "assertion") and posts it to
the backend. The backend asks Google's tokeninfo endpoint to validate it,
then checks the audience, issuer and expiry claims itself before trusting
the subject and email.

Uses httpx for async HTTP requests to Google.
"""

import logging
import time
from dataclasses import dataclass

import httpx

from fintrack.config import settings
from fintrack.services.exceptions import AuthProviderRejectedError


logger = logging.getLogger(__name__)


GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
GOOGLE_ISSUERS = frozenset({"accounts.google.com", "https://accounts.google.com"})

PROVIDER = "google"


@dataclass(frozen=True)
class GoogleIdentity:
    """Verified identity extracted from a Google ID token."""
    external_id: str
    email: str
    name: str


class GoogleIdentityVerifier:
    """
    Verifies Google ID tokens against the configured client ID.

    Every failure (bad token, wrong audience, network trouble, missing
    configuration) surfaces as AuthProviderRejectedError. The reason is
    logged; clients only see a generic message.
    """

    def __init__(
        self,
        client_id: str | None = None,
        timeout: float | None = None,
        tokeninfo_url: str = GOOGLE_TOKENINFO_URL,
    ) -> None:
        self._client_id = client_id if client_id is not None else settings.google_client_id
        self._timeout = timeout or settings.google_verify_timeout_seconds
        self._tokeninfo_url = tokeninfo_url

    async def verify(self, assertion: str) -> GoogleIdentity:
        """
        Verify an ID token and return the identity it asserts.

        Args:
            assertion: Google ID token (JWT) from the client

        Returns:
            GoogleIdentity with the stable subject id, email and display name

        Raises:
            AuthProviderRejectedError: On any verification failure
        """
        if not self._client_id:
            raise self._reject("Google sign-in is not configured")

        if not assertion:
            raise self._reject("Empty assertion")

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    self._tokeninfo_url,
                    params={"id_token": assertion},
                )
        except httpx.HTTPError as e:
            logger.error(f"Network error verifying Google token: {e}")
            raise self._reject(f"Network error: {type(e).__name__}") from e

        if response.status_code != 200:
            raise self._reject(f"tokeninfo returned HTTP {response.status_code}")

        try:
            claims = response.json()
        except ValueError as e:
            raise self._reject("tokeninfo returned non-JSON body") from e

        if not isinstance(claims, dict):
            raise self._reject("tokeninfo returned unexpected body")

        return self._identity_from_claims(claims)

    def _identity_from_claims(self, claims: dict) -> GoogleIdentity:
        if claims.get("aud") != self._client_id:
            raise self._reject("Audience mismatch")

        if claims.get("iss") not in GOOGLE_ISSUERS:
            raise self._reject("Unexpected issuer")

        try:
            expires_at = int(claims.get("exp", 0))
        except (TypeError, ValueError):
            raise self._reject("Malformed exp claim")
        if expires_at <= time.time():
            raise self._reject("Token expired")

        subject = claims.get("sub")
        email = claims.get("email")
        if not subject or not email:
            raise self._reject("Missing sub or email claim")

        name = claims.get("name") or email.split("@", 1)[0]

        return GoogleIdentity(external_id=str(subject), email=email, name=name)

    @staticmethod
    def _reject(reason: str) -> AuthProviderRejectedError:
        logger.warning(f"Google assertion rejected: {reason}")
        return AuthProviderRejectedError(PROVIDER, reason)
