"""Pydantic schemas for API request/response validation."""

from fintrack.schemas.auth import (
    SendOTPRequest,
    UserRegisterRequest,
    UserLoginRequest,
    GoogleLoginRequest,
    SetPasswordRequest,
    ChangePasswordRequest,
    UserResponse,
    AuthResponse,
    CurrentUserResponse,
    OTPChallengeResponse,
    MessageResponse,
    ClearDataResponse,
)
from fintrack.schemas.errors import ErrorDetail, ValidationErrorDetail
from fintrack.schemas.transactions import (
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
)
from fintrack.schemas.budgets import BudgetCreate, BudgetUpdate, BudgetResponse
from fintrack.schemas.investments import (
    InvestmentCreate,
    InvestmentUpdate,
    InvestmentResponse,
)

__all__ = [
    # Auth
    "SendOTPRequest",
    "UserRegisterRequest",
    "UserLoginRequest",
    "GoogleLoginRequest",
    "SetPasswordRequest",
    "ChangePasswordRequest",
    "UserResponse",
    "AuthResponse",
    "CurrentUserResponse",
    "OTPChallengeResponse",
    "MessageResponse",
    "ClearDataResponse",
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Resources
    "TransactionCreate",
    "TransactionUpdate",
    "TransactionResponse",
    "BudgetCreate",
    "BudgetUpdate",
    "BudgetResponse",
    "InvestmentCreate",
    "InvestmentUpdate",
    "InvestmentResponse",
]
