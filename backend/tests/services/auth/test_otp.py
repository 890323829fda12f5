# tests/services/auth/test_otp.py
"""
Tests for stateless OTP challenges.

Tests:
- Code generation format
- Challenge token shape and expiry
- Verification success and the ways it fails
- Replay within the window (accepted, nothing is stored)
"""

import time

import pytest

from fintrack.services.auth.otp import OTPService
from fintrack.services.exceptions import InvalidOTPError, OTPExpiredError


EMAIL = "alice@example.com"
NOW = 1_700_000_000


@pytest.fixture
def service() -> OTPService:
    return OTPService(secret_key="otp-unit-test-secret", expire_seconds=300)


# =============================================================================
# TEST: ISSUING
# =============================================================================


class TestIssue:
    """Tests for challenge issuance."""

    def test_code_is_six_digits(self):
        for _ in range(50):
            code = OTPService.generate_code()
            assert len(code) == 6
            assert code.isdigit()

    def test_challenge_token_ends_with_expiry(self, service):
        challenge = service.issue(EMAIL, now=NOW)

        signature, _, expires = challenge.challenge_token.rpartition(".")

        assert signature
        assert int(expires) == NOW + 300
        assert challenge.expires_at == NOW + 300

    def test_token_does_not_contain_code_or_email(self, service):
        challenge = service.issue(EMAIL, now=NOW)

        assert EMAIL not in challenge.challenge_token
        assert challenge.code not in challenge.challenge_token.rpartition(".")[0]

    def test_default_expiry_is_five_minutes(self):
        before = int(time.time())
        challenge = OTPService().issue(EMAIL)

        assert before + 300 <= challenge.expires_at <= int(time.time()) + 300


# =============================================================================
# TEST: VERIFICATION
# =============================================================================


class TestCheck:
    """Tests for challenge verification."""

    def test_matching_code_verifies(self, service):
        challenge = service.issue(EMAIL, now=NOW)

        service.check(EMAIL, challenge.code, challenge.challenge_token, now=NOW + 10)
        assert service.verify(EMAIL, challenge.code, challenge.challenge_token, now=NOW + 10)

    def test_valid_at_exact_expiry(self, service):
        challenge = service.issue(EMAIL, now=NOW)

        assert service.verify(EMAIL, challenge.code, challenge.challenge_token, now=NOW + 300)

    def test_expired_challenge_raises(self, service):
        challenge = service.issue(EMAIL, now=NOW)

        with pytest.raises(OTPExpiredError):
            service.check(EMAIL, challenge.code, challenge.challenge_token, now=NOW + 301)

    def test_expired_challenge_verify_false(self, service):
        challenge = service.issue(EMAIL, now=NOW)

        assert service.verify(EMAIL, challenge.code, challenge.challenge_token, now=NOW + 301) is False

    def test_wrong_code_raises(self, service):
        challenge = service.issue(EMAIL, now=NOW)
        wrong = "000000" if challenge.code != "000000" else "111111"

        with pytest.raises(InvalidOTPError) as exc_info:
            service.check(EMAIL, wrong, challenge.challenge_token, now=NOW)

        assert not isinstance(exc_info.value, OTPExpiredError)

    def test_other_email_raises(self, service):
        """A challenge is bound to the address it was issued for."""
        challenge = service.issue(EMAIL, now=NOW)

        with pytest.raises(InvalidOTPError):
            service.check("mallory@example.com", challenge.code, challenge.challenge_token, now=NOW)

    def test_extended_expiry_breaks_signature(self, service):
        """Pushing the expiry forward invalidates the signature."""
        challenge = service.issue(EMAIL, now=NOW)
        signature = challenge.challenge_token.rpartition(".")[0]
        extended = f"{signature}.{NOW + 3600}"

        with pytest.raises(InvalidOTPError):
            service.check(EMAIL, challenge.code, extended, now=NOW + 1000)

    def test_tampered_signature_raises(self, service):
        challenge = service.issue(EMAIL, now=NOW)
        tampered = "A" * 20 + challenge.challenge_token[20:]

        with pytest.raises(InvalidOTPError):
            service.check(EMAIL, challenge.code, tampered, now=NOW)

    def test_other_secret_rejects(self, service):
        challenge = service.issue(EMAIL, now=NOW)
        other = OTPService(secret_key="a-different-otp-secret", expire_seconds=300)

        assert other.verify(EMAIL, challenge.code, challenge.challenge_token, now=NOW) is False

    @pytest.mark.parametrize(
        "token",
        ["", "no-separator", ".1700000300", "abc.", "abc.notanumber", "abc.-5", "sïg.1700000300"],
    )
    def test_malformed_token_raises(self, service, token):
        with pytest.raises(InvalidOTPError):
            service.check(EMAIL, "123456", token, now=NOW)

    def test_challenge_can_be_replayed_within_window(self, service):
        """Nothing is stored, so the same challenge verifies more than once."""
        challenge = service.issue(EMAIL, now=NOW)

        assert service.verify(EMAIL, challenge.code, challenge.challenge_token, now=NOW + 1)
        assert service.verify(EMAIL, challenge.code, challenge.challenge_token, now=NOW + 2)


# =============================================================================
# TEST: EMAIL BINDING
# =============================================================================


class TestEmailBinding:
    """Dots in an address must not let a challenge move to another address."""

    def test_suffix_domain_challenge_rejected_for_shorter_email(self, service):
        challenge = service.issue("victim@example.com.io", now=NOW)

        with pytest.raises(InvalidOTPError):
            service.check("victim@example.com", f"io.{challenge.code}", challenge.challenge_token, now=NOW)

    @pytest.mark.parametrize("code", ["12345", "1234567", "12345a", "١٢٣٤٥٦", "io.123456", ""])
    def test_code_must_be_six_ascii_digits(self, service, code):
        challenge = service.issue(EMAIL, now=NOW)

        with pytest.raises(InvalidOTPError):
            service.check(EMAIL, code, challenge.challenge_token, now=NOW)

    def test_malformed_code_rejected_before_expiry_check(self, service):
        challenge = service.issue(EMAIL, now=NOW)

        with pytest.raises(InvalidOTPError) as exc_info:
            service.check(EMAIL, "abc", challenge.challenge_token, now=NOW + 10_000)

        assert not isinstance(exc_info.value, OTPExpiredError)
