# backend/fintrack/services/constants.py
"""
Business constants and limits.

Security-relevant windows (token lifetime, OTP lifetime) live in settings so
they can be tuned per environment; the values here are fixed properties of
the protocol or the API surface.
"""

# =============================================================================
# CREDENTIAL CONSTANTS
# =============================================================================

# Minimum accepted password length for registration, set and change flows
MIN_PASSWORD_LENGTH: int = 8

# Upper bound on submitted passwords (request schemas)
MAX_PASSWORD_LENGTH: int = 128

# Number of digits in an emailed one-time passcode
OTP_CODE_DIGITS: int = 6
OTP_CODE_PATTERN: str = rf"^[0-9]{{{OTP_CODE_DIGITS}}}$"

# Separator between signature and expiry in an OTP challenge token
OTP_CHALLENGE_SEPARATOR: str = "."

# Salt namespacing OTP signatures away from any other use of the key
OTP_SIGNER_SALT: str = "registration-otp"

# Token "type" claim for session tokens
SESSION_TOKEN_TYPE: str = "access"


# =============================================================================
# RESOURCE LIMIT CONSTANTS
# =============================================================================

# Maximum records returned by a single list request
MAX_LIST_LIMIT: int = 500
DEFAULT_LIST_LIMIT: int = 100


# =============================================================================
# RATE LIMITING CONSTANTS
# =============================================================================
# Format follows slowapi/limits syntax: "100/minute", "10/hour", etc.

# Default rate limit for read endpoints
RATE_LIMIT_DEFAULT: str = "100/minute"

# Rate limit for write endpoints (POST, PUT, DELETE)
RATE_LIMIT_WRITE: str = "30/minute"

# Health checks are polled by monitoring tools
RATE_LIMIT_HEALTH: str = "300/minute"

# Login - allows retries but prevents brute force
RATE_LIMIT_AUTH_LOGIN: str = "10/minute"

# Registration - prevents mass account creation
RATE_LIMIT_AUTH_REGISTER: str = "5/minute"

# OTP sending - prevents email bombing
RATE_LIMIT_AUTH_OTP: str = "3/minute"

# Set/change password - limits online guessing of the current password
RATE_LIMIT_AUTH_PASSWORD: str = "5/minute"
