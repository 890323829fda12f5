# backend/fintrack/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
Global exception handlers in main.py map them to HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   └── WeakPasswordError
    ├── NotFoundError
    │   └── ResourceNotFoundError
    ├── AuthenticationError               (Unauthenticated)
    │   ├── InvalidTokenError
    │   ├── TokenExpiredError
    │   ├── InvalidCredentialsError
    │   └── AuthProviderRejectedError
    ├── RegistrationError
    │   ├── UserExistsError
    │   └── InvalidOTPError
    │       └── OTPExpiredError
    ├── PasswordStateError
    │   ├── PasswordAlreadySetError
    │   └── NoPasswordSetError
    └── EmailDeliveryError
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when input validation fails inside a service.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class WeakPasswordError(ValidationError):
    """Raised when a new password is shorter than the minimum length."""

    def __init__(self, min_length: int, field: str = "password") -> None:
        self.min_length = min_length
        super().__init__(
            f"Password must be at least {min_length} characters",
            field=field,
        )


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Transaction", "Budget")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: int | str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class ResourceNotFoundError(NotFoundError):
    """
    Raised when an owned record does not exist for the requesting user.

    Used both for truly missing records and for records that belong to
    another owner, so the two cases produce identical responses.
    """

    def __init__(self, resource_type: str, resource_id: int) -> None:
        super().__init__(
            f"{resource_type} not found",
            resource_type=resource_type,
            resource_id=resource_id,
        )


# =============================================================================
# AUTHENTICATION ERRORS
# =============================================================================


class AuthenticationError(ServiceError):
    """Raised when a request cannot be tied to an authenticated user."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised for a malformed, mis-signed or wrong-type session token."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """Raised when a session token is past its expiry."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """
    Raised for any failed email/password check.

    Unknown email, password-less account and wrong password all share one
    message so responses cannot be used to enumerate accounts.
    """

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class AuthProviderRejectedError(AuthenticationError):
    """
    Raised when an external identity assertion fails verification.

    Attributes:
        provider: Identity provider name (e.g., "google")
        reason: Internal reason, logged but not returned to clients
    """

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider.capitalize()} authentication failed")


# =============================================================================
# REGISTRATION ERRORS
# =============================================================================


class RegistrationError(ServiceError):
    """Base exception for registration failures."""


class UserExistsError(RegistrationError):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("User already exists")


class InvalidOTPError(RegistrationError):
    """Raised when an OTP code or its challenge token does not verify."""

    def __init__(self, message: str = "Invalid verification code") -> None:
        super().__init__(message)


class OTPExpiredError(InvalidOTPError):
    """Raised when an OTP challenge is past its expiry."""

    def __init__(self) -> None:
        super().__init__("Verification code has expired. Please request a new one.")


# =============================================================================
# PASSWORD STATE ERRORS
# =============================================================================


class PasswordStateError(ServiceError):
    """Base exception for set/change password flows hitting the wrong account state."""


class PasswordAlreadySetError(PasswordStateError):
    """Raised by set-password when the account already has a password."""

    def __init__(self) -> None:
        super().__init__("Password is already set. Use change password instead.")


class NoPasswordSetError(PasswordStateError):
    """Raised by change-password when the account has no password yet."""

    def __init__(self) -> None:
        super().__init__("No password is set for this account. Use set password instead.")


# =============================================================================
# OUTBOUND DELIVERY ERRORS
# =============================================================================


class EmailDeliveryError(ServiceError):
    """
    Raised when an email could not be handed to the SMTP server.

    Attributes:
        recipient: Address the email was meant for
    """

    def __init__(self, recipient: str, reason: str) -> None:
        self.recipient = recipient
        self.reason = reason
        super().__init__("Failed to send verification email. Please try again later.")


__all__ = [
    # Base
    "ServiceError",
    # Validation
    "ValidationError",
    "WeakPasswordError",
    # Not Found
    "NotFoundError",
    "ResourceNotFoundError",
    # Authentication
    "AuthenticationError",
    "InvalidTokenError",
    "TokenExpiredError",
    "InvalidCredentialsError",
    "AuthProviderRejectedError",
    # Registration
    "RegistrationError",
    "UserExistsError",
    "InvalidOTPError",
    "OTPExpiredError",
    # Password state
    "PasswordStateError",
    "PasswordAlreadySetError",
    "NoPasswordSetError",
    # Delivery
    "EmailDeliveryError",
]
