# backend/fintrack/routers/users.py
"""
Account management endpoints for the authenticated user.

- POST /user/set-password: add a password to a Google-only account
- POST /user/change-password: rotate an existing password
- DELETE /user/data: remove all of the user's financial records
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from fintrack.database import get_db
from fintrack.dependencies import CurrentIdentity, get_auth_service
from fintrack.middleware.rate_limit import limiter, RATE_LIMIT_AUTH_PASSWORD, RATE_LIMIT_WRITE
from fintrack.schemas.auth import (
    SetPasswordRequest,
    ChangePasswordRequest,
    MessageResponse,
    ClearDataResponse,
)
from fintrack.services.auth import AuthService
from fintrack.services.resources import clear_user_data


router = APIRouter(prefix="/user", tags=["User"])


@router.post(
    "/set-password",
    response_model=MessageResponse,
    summary="Set a password",
    description="Add email/password login to an account that was created with Google.",
)
@limiter.limit(RATE_LIMIT_AUTH_PASSWORD)
def set_password(
    request: Request,  # Required for rate limiter
    data: SetPasswordRequest,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    auth_service.set_password(db, identity.user, data.new_password)
    return MessageResponse(message="Password set successfully")


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change password",
    description="Replace the current password. The current password must be supplied.",
)
@limiter.limit(RATE_LIMIT_AUTH_PASSWORD)
def change_password(
    request: Request,  # Required for rate limiter
    data: ChangePasswordRequest,
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    auth_service.change_password(
        db,
        identity.user,
        current_password=data.current_password,
        new_password=data.new_password,
    )
    return MessageResponse(message="Password changed successfully")


@router.delete(
    "/data",
    response_model=ClearDataResponse,
    summary="Clear all financial data",
    description=(
        "Delete every transaction, budget and investment owned by the current user. "
        "The account itself is kept. This action cannot be undone."
    ),
)
@limiter.limit(RATE_LIMIT_WRITE)
def clear_data(
    request: Request,  # Required for rate limiter
    identity: CurrentIdentity,
    db: Annotated[Session, Depends(get_db)],
) -> ClearDataResponse:
    cleared = clear_user_data(db, identity.user_id)
    return ClearDataResponse(
        message="All data cleared",
        deleted={
            "transactions": cleared.transactions,
            "budgets": cleared.budgets,
            "investments": cleared.investments,
        },
    )
