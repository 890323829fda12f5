# backend/fintrack/routers/budgets.py
"""
Budget endpoints.

All endpoints require authentication and are scoped to the caller's own
budgets; other users' budgets answer 404.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from fintrack.database import get_db
from fintrack.dependencies import CurrentIdentity
from fintrack.middleware.rate_limit import limiter, RATE_LIMIT_WRITE
from fintrack.models import Budget
from fintrack.schemas.budgets import BudgetCreate, BudgetUpdate, BudgetResponse
from fintrack.services.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from fintrack.services.exceptions import ValidationError
from fintrack.services.resources import budget_service

router = APIRouter(
    prefix="/budgets",
    tags=["Budgets"],
)


@router.get(
    "/",
    response_model=list[BudgetResponse],
    summary="List budgets",
)
def list_budgets(
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
        skip: int = Query(default=0, ge=0),
        limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
) -> list[Budget]:
    return budget_service.list_all(db, identity.user_id, skip=skip, limit=limit)


@router.post(
    "/",
    response_model=BudgetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a budget",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_budget(
        request: Request,  # Required for rate limiter
        data: BudgetCreate,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> Budget:
    return budget_service.create(db, identity.user_id, data.model_dump())


@router.get(
    "/{budget_id}",
    response_model=BudgetResponse,
    summary="Get a budget by ID",
)
def get_budget(
        budget_id: int,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> Budget:
    return budget_service.get(db, identity.user_id, budget_id)


@router.put(
    "/{budget_id}",
    response_model=BudgetResponse,
    summary="Update a budget",
)
@limiter.limit(RATE_LIMIT_WRITE)
def update_budget(
        request: Request,  # Required for rate limiter
        budget_id: int,
        data: BudgetUpdate,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> Budget:
    """
    Update a budget (partial update).

    A single changed date is checked against the stored other end of the
    range before anything is written.
    """
    budget = budget_service.get(db, identity.user_id, budget_id)
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)

    start_date = update_data.get("start_date", budget.start_date)
    end_date = update_data.get("end_date", budget.end_date)
    if end_date < start_date:
        raise ValidationError("endDate must not be before startDate", field="endDate")

    return budget_service.update(db, identity.user_id, budget_id, update_data)


@router.delete(
    "/{budget_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a budget",
)
@limiter.limit(RATE_LIMIT_WRITE)
def delete_budget(
        request: Request,  # Required for rate limiter
        budget_id: int,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> None:
    budget_service.delete(db, identity.user_id, budget_id)
    return None
