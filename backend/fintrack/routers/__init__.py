# backend/fintrack/routers/__init__.py
"""
API routers for the Personal Finance Tracker.

Each router handles a specific domain:
- auth: Registration, login (password and Google), current user
- users: Set/change password, clear financial data
- transactions: Income and expense records
- budgets: Spending limits per category and period
- investments: Manually tracked holdings
"""

from fintrack.routers.auth import router as auth_router
from fintrack.routers.users import router as users_router
from fintrack.routers.transactions import router as transactions_router
from fintrack.routers.budgets import router as budgets_router
from fintrack.routers.investments import router as investments_router

__all__ = [
    "auth_router",
    "users_router",
    "transactions_router",
    "budgets_router",
    "investments_router",
]
