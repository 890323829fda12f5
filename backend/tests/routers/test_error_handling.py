# tests/routers/test_error_handling.py
"""
Integration tests for error handling across the API.

These tests verify:
- Consistent error response format (ErrorDetail schema)
- Correct HTTP status codes for different error types
- Validation error details
- Global exception handler behavior
- Health endpoints
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from fintrack.main import app
from fintrack.services.exceptions import ServiceError


def _assert_error_format(body: dict) -> None:
    assert set(body) == {"error", "message", "details"}
    assert isinstance(body["error"], str)
    assert isinstance(body["message"], str)


# =============================================================================
# AUTHENTICATION ERRORS
# =============================================================================


class TestAuthenticationErrors:

    def test_missing_token_format(self, client):
        response = client.get("/transactions/")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        body = response.json()
        _assert_error_format(body)
        assert body["error"] == "AuthenticationError"
        assert body["message"] == "Not authenticated"

    def test_wrong_scheme(self, client):
        response = client.get("/transactions/", headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert response.status_code == 401

    def test_invalid_token_never_403(self, client):
        response = client.get("/budgets/", headers={"Authorization": "Bearer x.y.z"})

        assert response.status_code == 401
        assert response.json()["error"] == "InvalidTokenError"


# =============================================================================
# NOT FOUND
# =============================================================================


class TestNotFound:

    def test_missing_record(self, client, user, headers_for):
        response = client.get("/transactions/424242", headers=headers_for(user))

        assert response.status_code == 404
        body = response.json()
        _assert_error_format(body)
        assert body == {
            "error": "NotFoundError",
            "message": "Transaction not found",
            "details": None,
        }

    def test_unknown_route(self, client):
        response = client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"] == "NotFoundError"

    def test_method_not_allowed(self, client):
        response = client.patch("/auth/login", json={})

        assert response.status_code == 405
        assert response.json()["error"] == "MethodNotAllowedError"


# =============================================================================
# REQUEST VALIDATION
# =============================================================================


class TestRequestValidation:

    def test_validation_error_format(self, client):
        response = client.post("/auth/login", json={"email": "not-an-email"})

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "ValidationError"
        assert body["message"] == "Request validation failed"
        fields = {detail["field"] for detail in body["details"]}
        assert "body.email" in fields
        assert "body.password" in fields
        for detail in body["details"]:
            assert set(detail) == {"field", "message", "type"}

    def test_non_integer_id(self, client, user, headers_for):
        response = client.get("/transactions/abc", headers=headers_for(user))

        assert response.status_code == 422

    def test_limit_out_of_range(self, client, user, headers_for):
        response = client.get("/transactions/", params={"limit": 100000}, headers=headers_for(user))

        assert response.status_code == 422


# =============================================================================
# UNHANDLED ERRORS
# =============================================================================


class TestServerErrors:

    @pytest.fixture
    def failing_client(self, client):
        """Client that turns unhandled exceptions into responses instead of raising."""
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client

    def test_unexpected_exception_is_generic_500(self, failing_client, user, headers_for):
        with patch(
            "fintrack.routers.transactions.transaction_service.list_all",
            side_effect=RuntimeError("database exploded: secret details"),
        ):
            response = failing_client.get("/transactions/", headers=headers_for(user))

        assert response.status_code == 500
        body = response.json()
        _assert_error_format(body)
        assert body["error"] == "InternalServerError"
        assert "secret" not in response.text

    def test_unmapped_service_error_is_500(self, failing_client, user, headers_for):
        with patch(
            "fintrack.routers.transactions.transaction_service.list_all",
            side_effect=ServiceError("internal detail"),
        ):
            response = failing_client.get("/transactions/", headers=headers_for(user))

        assert response.status_code == 500
        assert response.json()["error"] == "ServiceError"
        assert "internal detail" not in response.text


# =============================================================================
# HEALTH
# =============================================================================


class TestHealth:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["google_signin"]["status"] == "configured"

    def test_health_database_down(self, client, db):
        with patch.object(db, "execute", side_effect=RuntimeError("db down")):
            response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_liveness(self, client):
        response = client.get("/health/live")

        assert response.status_code == 200
        assert response.json() == {"status": "alive"}
