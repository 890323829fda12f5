"""
Authentication services for the Personal Finance Tracker.

This module provides:
- Password hashing and verification (bcrypt)
- Session token creation and validation (JWT)
- Stateless OTP challenges for registration
- Google identity verification
- OTP email delivery
- Core authentication service (AuthService)

Usage:
    from fintrack.services.auth import AuthService, PasswordService, JWTHandler

    # Hash a password
    hashed = PasswordService.hash_password("mypassword")

    # Create a session token
    token = JWTHandler.create_session_token(user_id=user.id)

    # Resolve it again (None when expired or tampered)
    user_id = JWTHandler.verify_session_token(token)
"""

from fintrack.services.auth.password import PasswordService
from fintrack.services.auth.jwt_handler import JWTHandler
from fintrack.services.auth.otp import OTPService, OTPChallenge
from fintrack.services.auth.email_service import EmailService
from fintrack.services.auth.oauth_google import GoogleIdentityVerifier, GoogleIdentity
from fintrack.services.auth.service import AuthService, AuthResult

__all__ = [
    "PasswordService",
    "JWTHandler",
    "OTPService",
    "OTPChallenge",
    "EmailService",
    "GoogleIdentityVerifier",
    "GoogleIdentity",
    "AuthService",
    "AuthResult",
]
