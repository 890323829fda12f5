# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Test environment variables (set BEFORE any fintrack import)
- Database session fixtures (in-memory SQLite)
- Auth service with mocked email delivery
- TestClient with dependency overrides
- User factories and auth headers
"""

import os

# Set required environment variables BEFORE importing app modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("APP_NAME", "Test App")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-at-least-32-chars-long")
os.environ.setdefault("OTP_SECRET_KEY", "test-otp-secret-key-at-least-32-chars-long")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")

from typing import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from fintrack.database import get_db
from fintrack.dependencies import (
    get_auth_service,
    get_google_verifier,
    clear_service_caches,
)
from fintrack.main import app
from fintrack.models import Base, User
from fintrack.services.auth import (
    AuthService,
    EmailService,
    GoogleIdentityVerifier,
    JWTHandler,
    OTPService,
    PasswordService,
)


DEFAULT_PASSWORD = "password123"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db(db_engine) -> Iterator[Session]:
    """Create a database session for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def mock_email_service() -> MagicMock:
    """Email service that records calls instead of talking to SMTP."""
    return MagicMock(spec=EmailService)


@pytest.fixture
def otp_service() -> OTPService:
    """Real OTP service keyed from the test settings."""
    return OTPService()


@pytest.fixture
def auth_service(mock_email_service, otp_service) -> AuthService:
    """Create auth service with mocked email delivery."""
    return AuthService(email_service=mock_email_service, otp_service=otp_service)


@pytest.fixture
def mock_google_verifier() -> MagicMock:
    """Google verifier whose verify() coroutine is configured per test."""
    verifier = MagicMock(spec=GoogleIdentityVerifier)
    verifier.verify = AsyncMock()
    return verifier


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture
def client(db: Session, auth_service: AuthService, mock_google_verifier) -> Iterator[TestClient]:
    """Create TestClient with database and service overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    app.dependency_overrides[get_google_verifier] = lambda: mock_google_verifier

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    clear_service_caches()


# =============================================================================
# USER FACTORIES
# =============================================================================

def create_user(
    db: Session,
    email: str = "test@example.com",
    name: str = "Test User",
    password: str | None = DEFAULT_PASSWORD,
    google_id: str | None = None,
) -> User:
    """Create a user directly in the database. password=None makes a Google-only account."""
    user = User(
        name=name,
        email=email,
        hashed_password=PasswordService.hash_password(password) if password else None,
        google_id=google_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header carrying a fresh session token for the user."""
    return {"Authorization": f"Bearer {JWTHandler.create_session_token(user.id)}"}


@pytest.fixture
def user(db: Session) -> User:
    """A password user."""
    return create_user(db)


@pytest.fixture
def other_user(db: Session) -> User:
    """A second, unrelated password user."""
    return create_user(db, email="other@example.com", name="Other User")


@pytest.fixture
def google_user(db: Session) -> User:
    """A user who signed up with Google and has no password."""
    return create_user(
        db,
        email="gina@example.com",
        name="Gina",
        password=None,
        google_id="google-sub-123",
    )


@pytest.fixture
def make_user(db: Session):
    """Factory fixture wrapping create_user() with the test session."""
    def _make_user(**kwargs) -> User:
        return create_user(db, **kwargs)
    return _make_user


@pytest.fixture
def headers_for():
    """Factory fixture returning bearer headers for a user."""
    return auth_headers
