# tests/routers/test_users_api.py
"""
API layer tests for account management.

Tests:
- POST /user/set-password
- POST /user/change-password
- DELETE /user/data
"""

from datetime import date
from decimal import Decimal

from fintrack.models import Budget, Investment, InvestmentType, Transaction, TransactionType

from conftest import DEFAULT_PASSWORD


def _login(client, email, password):
    return client.post("/auth/login", json={"email": email, "password": password})


# =============================================================================
# SET PASSWORD
# =============================================================================


class TestSetPassword:

    def test_google_user_sets_password_then_logs_in(self, client, google_user, headers_for):
        response = client.post(
            "/user/set-password",
            json={"newPassword": "my-first-password"},
            headers=headers_for(google_user),
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Password set successfully"}

        login = _login(client, google_user.email, "my-first-password")
        assert login.status_code == 200
        assert login.json()["user"]["hasPassword"] is True

    def test_already_set(self, client, user, headers_for):
        response = client.post(
            "/user/set-password",
            json={"newPassword": "another-password"},
            headers=headers_for(user),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "PasswordAlreadySetError"
        assert _login(client, user.email, DEFAULT_PASSWORD).status_code == 200

    def test_weak_password(self, client, google_user, headers_for):
        response = client.post(
            "/user/set-password",
            json={"newPassword": "short"},
            headers=headers_for(google_user),
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "newPassword"

    def test_requires_auth(self, client):
        response = client.post("/user/set-password", json={"newPassword": "whatever-123"})

        assert response.status_code == 401


# =============================================================================
# CHANGE PASSWORD
# =============================================================================


class TestChangePassword:

    def test_change_password(self, client, user, headers_for):
        response = client.post(
            "/user/change-password",
            json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "new-password-456"},
            headers=headers_for(user),
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Password changed successfully"}
        assert _login(client, user.email, "new-password-456").status_code == 200
        assert _login(client, user.email, DEFAULT_PASSWORD).status_code == 401

    def test_wrong_current_password(self, client, user, headers_for):
        response = client.post(
            "/user/change-password",
            json={"currentPassword": "not-it-at-all", "newPassword": "new-password-456"},
            headers=headers_for(user),
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Current password is incorrect"
        assert _login(client, user.email, DEFAULT_PASSWORD).status_code == 200

    def test_google_only_account(self, client, google_user, headers_for):
        response = client.post(
            "/user/change-password",
            json={"currentPassword": "", "newPassword": "new-password-456"},
            headers=headers_for(google_user),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "NoPasswordSetError"

    def test_weak_new_password(self, client, user, headers_for):
        response = client.post(
            "/user/change-password",
            json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "short"},
            headers=headers_for(user),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "WeakPasswordError"


# =============================================================================
# CLEAR DATA
# =============================================================================


class TestClearData:

    def _seed(self, db, owner_id):
        db.add_all([
            Transaction(
                owner_id=owner_id, type=TransactionType.EXPENSE, amount=Decimal("12.50"),
                category="Food", description="Lunch", date=date(2026, 1, 5),
            ),
            Transaction(
                owner_id=owner_id, type=TransactionType.INCOME, amount=Decimal("3000.00"),
                category="Salary", description="January", date=date(2026, 1, 31),
            ),
            Budget(
                owner_id=owner_id, category="Food", amount=Decimal("400.00"),
                start_date=date(2026, 1, 1), end_date=date(2026, 1, 31),
            ),
            Investment(
                owner_id=owner_id, symbol="AAPL", name="Apple Inc.", type=InvestmentType.STOCK,
                quantity=Decimal("10"), purchase_price=Decimal("150"),
                current_price=Decimal("190"), purchase_date=date(2025, 6, 1),
            ),
        ])
        db.commit()

    def test_clears_only_own_data(self, client, db, user, other_user, headers_for):
        self._seed(db, user.id)
        self._seed(db, other_user.id)

        response = client.delete("/user/data", headers=headers_for(user))

        assert response.status_code == 200
        assert response.json() == {
            "message": "All data cleared",
            "deleted": {"transactions": 2, "budgets": 1, "investments": 1},
        }
        assert client.get("/transactions/", headers=headers_for(user)).json() == []
        assert len(client.get("/transactions/", headers=headers_for(other_user)).json()) == 2
        assert len(client.get("/budgets/", headers=headers_for(other_user)).json()) == 1
        assert len(client.get("/investments/", headers=headers_for(other_user)).json()) == 1

    def test_account_survives(self, client, db, user, headers_for):
        self._seed(db, user.id)

        client.delete("/user/data", headers=headers_for(user))

        assert client.get("/auth/me", headers=headers_for(user)).status_code == 200

    def test_nothing_to_clear(self, client, user, headers_for):
        response = client.delete("/user/data", headers=headers_for(user))

        assert response.status_code == 200
        assert response.json()["deleted"] == {"transactions": 0, "budgets": 0, "investments": 0}
