# tests/test_config.py
"""
Tests for settings validation.
"""

import pytest
from pydantic import ValidationError

from fintrack.config import Settings


JWT_KEY = "j" * 32
OTP_KEY = "o" * 32


def _settings(**kwargs) -> Settings:
    values = {"environment": "test", "jwt_secret_key": JWT_KEY, "otp_secret_key": OTP_KEY}
    values.update(kwargs)
    return Settings(_env_file=None, **values)


class TestSecrets:

    def test_valid_secrets(self):
        settings = _settings()

        assert settings.jwt_secret_key == JWT_KEY
        assert settings.otp_secret_key == OTP_KEY

    def test_missing_jwt_secret(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

        with pytest.raises(ValidationError, match="JWT_SECRET_KEY"):
            Settings(_env_file=None, environment="test", otp_secret_key=OTP_KEY)

    def test_missing_otp_secret(self, monkeypatch):
        monkeypatch.delenv("OTP_SECRET_KEY", raising=False)

        with pytest.raises(ValidationError, match="OTP_SECRET_KEY"):
            Settings(_env_file=None, environment="test", jwt_secret_key=JWT_KEY)

    def test_secrets_must_differ(self):
        with pytest.raises(ValidationError, match="must be different"):
            _settings(otp_secret_key=JWT_KEY)

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            _settings(jwt_secret_key="too-short")


class TestDatabaseConfig:

    def test_test_environment_defaults_to_sqlite(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        settings = _settings()

        assert settings.database_url == "sqlite:///:memory:"
        assert settings.is_sqlite
        assert settings.is_test

    def test_production_requires_postgres(self):
        with pytest.raises(ValidationError, match="PostgreSQL"):
            _settings(environment="production", database_url="sqlite:///prod.db")

    def test_production_with_postgres(self):
        settings = _settings(
            environment="production",
            database_url="postgresql://user:pw@db:5432/fintrack",
        )

        assert settings.is_production
        assert not settings.is_sqlite


class TestFeatureFlags:

    def test_email_configured_requires_all_smtp_fields(self):
        assert not _settings(smtp_host="smtp.example.com").is_email_configured
        assert _settings(
            smtp_host="smtp.example.com",
            smtp_user="mailer",
            smtp_password="pw",
            smtp_from_email="noreply@example.com",
        ).is_email_configured

    def test_google_signin_configured(self):
        assert _settings(google_client_id="abc.apps.googleusercontent.com").is_google_signin_configured
        assert not _settings(google_client_id="").is_google_signin_configured

    def test_defaults(self):
        settings = _settings()

        assert settings.jwt_session_token_expire_days == 30
        assert settings.otp_expire_seconds == 300
