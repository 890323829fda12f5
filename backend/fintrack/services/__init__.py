# backend/fintrack/services/__init__.py
"""
Service layer for business logic.

Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive database sessions as parameters (not via Depends)

Architecture:
    services/
    ├── __init__.py          # This file - main exports
    ├── exceptions.py        # Domain exceptions
    ├── constants.py         # Business constants and limits
    ├── resources.py         # Owner-scoped CRUD for user records
    └── auth/                # Authentication
        ├── password.py      # bcrypt hashing
        ├── jwt_handler.py   # Session tokens
        ├── otp.py           # Stateless signed OTP challenges
        ├── email_service.py # OTP email delivery
        ├── oauth_google.py  # Google ID token verification
        └── service.py       # Auth orchestrator
"""

from fintrack.services.exceptions import (
    ServiceError,
    ValidationError,
    NotFoundError,
    ResourceNotFoundError,
    AuthenticationError,
)
from fintrack.services.resources import (
    OwnedResourceService,
    ClearedData,
    clear_user_data,
    transaction_service,
    budget_service,
    investment_service,
)

__all__ = [
    # Services
    "OwnedResourceService",
    "ClearedData",
    "clear_user_data",
    "transaction_service",
    "budget_service",
    "investment_service",
    # Exceptions
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "ResourceNotFoundError",
    "AuthenticationError",
]
