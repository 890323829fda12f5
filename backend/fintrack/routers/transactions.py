# backend/fintrack/routers/transactions.py
"""
Income/expense transaction endpoints.

All endpoints require authentication and only ever touch the caller's
own records. A transaction id that belongs to another user answers 404,
the same as an id that does not exist.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from fintrack.database import get_db
from fintrack.dependencies import CurrentIdentity
from fintrack.middleware.rate_limit import limiter, RATE_LIMIT_WRITE
from fintrack.models import Transaction, TransactionType
from fintrack.schemas.transactions import (
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
)
from fintrack.services.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from fintrack.services.exceptions import ValidationError
from fintrack.services.resources import transaction_service

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/transactions",
    tags=["Transactions"],
)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "/",
    response_model=list[TransactionResponse],
    summary="List transactions",
    response_description="The caller's transactions, newest first",
)
def list_transactions(
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
        # Filters
        type: TransactionType | None = Query(default=None, description="income or expense"),
        category: str | None = Query(default=None, max_length=100, description="Exact category"),
        start_date: date | None = Query(default=None, description="Earliest date (inclusive)"),
        end_date: date | None = Query(default=None, description="Latest date (inclusive)"),
        # Pagination
        skip: int = Query(default=0, ge=0, description="Number of records to skip"),
        limit: int = Query(
            default=DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT,
            description="Maximum records to return",
        ),
) -> list[Transaction]:
    """
    Retrieve the caller's transactions.

    Supports filtering by **type**, **category** and a **start_date** /
    **end_date** range, plus **skip** / **limit** pagination.
    """
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date must not be after end_date", field="start_date")

    filters = []
    if type is not None:
        filters.append(Transaction.type == type)
    if category is not None:
        filters.append(Transaction.category == category)
    if start_date is not None:
        filters.append(Transaction.date >= start_date)
    if end_date is not None:
        filters.append(Transaction.date <= end_date)

    return transaction_service.list_all(
        db, identity.user_id, filters=filters, skip=skip, limit=limit,
    )


@router.post(
    "/",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a transaction",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_transaction(
        request: Request,  # Required for rate limiter
        data: TransactionCreate,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> Transaction:
    """Create a transaction owned by the caller."""
    return transaction_service.create(db, identity.user_id, data.model_dump())


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get a transaction by ID",
)
def get_transaction(
        transaction_id: int,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> Transaction:
    """Raises **404** if the transaction does not exist or is not the caller's."""
    return transaction_service.get(db, identity.user_id, transaction_id)


@router.put(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Update a transaction",
)
@limiter.limit(RATE_LIMIT_WRITE)
def update_transaction(
        request: Request,  # Required for rate limiter
        transaction_id: int,
        data: TransactionUpdate,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> Transaction:
    """
    Update a transaction (partial update).

    Only the provided fields are changed. Raises **404** if the
    transaction does not exist or is not the caller's.
    """
    return transaction_service.update(
        db, identity.user_id, transaction_id, data.model_dump(exclude_unset=True, exclude_none=True),
    )


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a transaction",
)
@limiter.limit(RATE_LIMIT_WRITE)
def delete_transaction(
        request: Request,  # Required for rate limiter
        transaction_id: int,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> None:
    """Raises **404** if the transaction does not exist or is not the caller's."""
    transaction_service.delete(db, identity.user_id, transaction_id)
    return None
