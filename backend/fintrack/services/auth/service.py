"""
Core authentication service.

Handles:
- Registration OTP delivery
- Registration (email/password, gated by an OTP challenge)
- Login (email/password)
- Login (Google identity), linking or creating the account
- Setting a first password on a Google-only account
- Changing an existing password
- Resolving a session token to its user (used by the access guard)

Security features:
- All email/password login failures share one error and message
- Stale bcrypt hashes are upgraded on successful login
- A wrong current password never alters the stored hash
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fintrack.models import User
from fintrack.services.auth.password import PasswordService
from fintrack.services.auth.jwt_handler import JWTHandler
from fintrack.services.auth.otp import OTPService, OTPChallenge
from fintrack.services.auth.email_service import EmailService
from fintrack.services.auth.oauth_google import GoogleIdentity
from fintrack.services.constants import MIN_PASSWORD_LENGTH
from fintrack.services.exceptions import (
    AuthenticationError,
    InvalidCredentialsError,
    UserExistsError,
    WeakPasswordError,
    PasswordAlreadySetError,
    NoPasswordSetError,
)


logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """An authenticated user and the session token issued for them."""
    user: User
    token: str


class AuthService:
    """
    Core authentication service.

    Manages account creation, credential checks and session issuance.
    Collaborators are injected so tests can replace email delivery.
    """

    def __init__(
        self,
        email_service: EmailService | None = None,
        otp_service: OTPService | None = None,
    ) -> None:
        """
        Initialize the auth service.

        Args:
            email_service: Sends OTP codes. Defaults to a new EmailService.
            otp_service: Issues and checks OTP challenges. Defaults to a
                new OTPService keyed from settings.
        """
        self._email_service = email_service or EmailService()
        self._otp_service = otp_service or OTPService()

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def send_otp(self, email: str) -> OTPChallenge:
        """
        Issue a registration challenge and email its code.

        Returns:
            The issued challenge. Callers hand only the challenge token
            and expiry back to the client.

        Raises:
            EmailDeliveryError: If the code could not be emailed
        """
        challenge = self._otp_service.issue(email)
        self._email_service.send_otp_email(email, challenge.code)

        logger.info("Registration OTP issued")
        return challenge

    def register(
        self,
        db: Session,
        name: str,
        email: str,
        password: str,
        code: str,
        challenge_token: str,
    ) -> AuthResult:
        """
        Register a new user with email/password after OTP verification.

        The duplicate-email check runs first, so an existing account is
        reported as such whatever the state of the submitted challenge.

        Raises:
            UserExistsError: If the email is already registered
            OTPExpiredError: If the challenge window has passed
            InvalidOTPError: If the code or challenge does not verify
            WeakPasswordError: If the password is too short
        """
        if self.get_user_by_email(db, email) is not None:
            raise UserExistsError(email)

        self._otp_service.check(email, code, challenge_token)

        self._require_strong_password(password)

        user = User(
            name=name,
            email=email,
            hashed_password=PasswordService.hash_password(password),
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Concurrent registration for the same email won the insert
            db.rollback()
            raise UserExistsError(email)
        db.refresh(user)

        logger.info(f"User registered: {user.id}")
        return AuthResult(user=user, token=JWTHandler.create_session_token(user.id))

    # =========================================================================
    # LOGIN
    # =========================================================================

    def login(self, db: Session, email: str, password: str) -> AuthResult:
        """
        Authenticate with email/password.

        Unknown email, an account without a password and a wrong password
        are indistinguishable to the caller.

        Raises:
            InvalidCredentialsError: If the credentials do not match
        """
        user = self.get_user_by_email(db, email)

        if not user or not user.hashed_password:
            raise InvalidCredentialsError()

        if not PasswordService.verify_password(password, user.hashed_password):
            logger.warning(f"Failed password login for user {user.id}")
            raise InvalidCredentialsError()

        if PasswordService.needs_rehash(user.hashed_password):
            user.hashed_password = PasswordService.hash_password(password)
            db.commit()

        logger.info(f"User logged in: {user.id}")
        return AuthResult(user=user, token=JWTHandler.create_session_token(user.id))

    def google_login(self, db: Session, identity: GoogleIdentity) -> AuthResult:
        """
        Log in with an already verified Google identity.

        Looks the user up by email or Google subject id. An email-matched
        account without a Google id gets linked; when nothing matches, a
        password-less account is created.
        """
        candidates = db.execute(
            select(User).where(
                or_(
                    User.email == identity.email,
                    User.google_id == identity.external_id,
                )
            )
        ).scalars().all()

        # Prefer the account already linked to this Google subject
        user = next(
            (u for u in candidates if u.google_id == identity.external_id),
            candidates[0] if candidates else None,
        )

        if user is not None:
            if user.google_id is None:
                user.google_id = identity.external_id
                db.commit()
                logger.info(f"Linked Google identity to user {user.id}")
        else:
            # If two requests try to create the same user simultaneously,
            # one gets an IntegrityError and re-reads the winner's row.
            try:
                user = User(
                    name=identity.name,
                    email=identity.email,
                    google_id=identity.external_id,
                )
                db.add(user)
                db.commit()
                db.refresh(user)
                logger.info(f"User created via Google: {user.id}")
            except IntegrityError:
                db.rollback()
                user = db.execute(
                    select(User).where(User.email == identity.email)
                ).scalar_one_or_none()

                if user is None:
                    raise

        logger.info(f"User logged in via Google: {user.id}")
        return AuthResult(user=user, token=JWTHandler.create_session_token(user.id))

    # =========================================================================
    # PASSWORD MANAGEMENT
    # =========================================================================

    def set_password(self, db: Session, user: User, new_password: str) -> User:
        """
        Give a password to an account that has none (Google-only users).

        Raises:
            PasswordAlreadySetError: If the account already has a password
            WeakPasswordError: If the password is too short
        """
        if user.hashed_password:
            raise PasswordAlreadySetError()

        self._require_strong_password(new_password, field="newPassword")

        user.hashed_password = PasswordService.hash_password(new_password)
        db.commit()

        logger.info(f"Password set for user {user.id}")
        return user

    def change_password(
        self,
        db: Session,
        user: User,
        current_password: str,
        new_password: str,
    ) -> User:
        """
        Replace an existing password after re-checking the current one.

        Raises:
            NoPasswordSetError: If the account has no password yet
            InvalidCredentialsError: If current_password is wrong
            WeakPasswordError: If the new password is too short
        """
        if not user.hashed_password:
            raise NoPasswordSetError()

        if not PasswordService.verify_password(current_password, user.hashed_password):
            logger.warning(f"Password change rejected for user {user.id}: wrong current password")
            raise InvalidCredentialsError("Current password is incorrect")

        self._require_strong_password(new_password, field="newPassword")

        user.hashed_password = PasswordService.hash_password(new_password)
        db.commit()

        logger.info(f"Password changed for user {user.id}")
        return user

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def authenticate_token(self, db: Session, token: str) -> User:
        """
        Resolve a session token to its user.

        Raises:
            TokenExpiredError: If the token has expired
            InvalidTokenError: If the token does not verify
            AuthenticationError: If the user no longer exists
        """
        payload = JWTHandler.validate_session_token(token)

        user = self.get_user_by_id(db, payload["sub"])
        if user is None:
            logger.warning("Valid token for unknown user")
            raise AuthenticationError()

        return user

    def get_user_by_id(self, db: Session, user_id: str) -> User | None:
        """Get a user by their ID, or None."""
        return db.get(User, user_id)

    def get_user_by_email(self, db: Session, email: str) -> User | None:
        """Get a user by their email (exact match), or None."""
        return db.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

    @staticmethod
    def _require_strong_password(password: str, field: str = "password") -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError(MIN_PASSWORD_LENGTH, field=field)
