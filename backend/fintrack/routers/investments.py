# backend/fintrack/routers/investments.py
"""
Investment holding endpoints.

Prices are entered by the user; there is no market data feed. All
endpoints are scoped to the caller's own holdings and answer 404 for
anyone else's.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from fintrack.database import get_db
from fintrack.dependencies import CurrentIdentity
from fintrack.middleware.rate_limit import limiter, RATE_LIMIT_WRITE
from fintrack.models import Investment, InvestmentType
from fintrack.schemas.investments import (
    InvestmentCreate,
    InvestmentUpdate,
    InvestmentResponse,
)
from fintrack.services.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT
from fintrack.services.resources import investment_service

router = APIRouter(
    prefix="/investments",
    tags=["Investments"],
)


@router.get(
    "/",
    response_model=list[InvestmentResponse],
    summary="List investments",
)
def list_investments(
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
        type: InvestmentType | None = Query(default=None, description="stock, crypto or mutual_fund"),
        skip: int = Query(default=0, ge=0),
        limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
) -> list[Investment]:
    filters = [Investment.type == type] if type is not None else []
    return investment_service.list_all(
        db, identity.user_id, filters=filters, skip=skip, limit=limit,
    )


@router.post(
    "/",
    response_model=InvestmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an investment",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_investment(
        request: Request,  # Required for rate limiter
        data: InvestmentCreate,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> Investment:
    return investment_service.create(db, identity.user_id, data.model_dump())


@router.get(
    "/{investment_id}",
    response_model=InvestmentResponse,
    summary="Get an investment by ID",
)
def get_investment(
        investment_id: int,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> Investment:
    return investment_service.get(db, identity.user_id, investment_id)


@router.put(
    "/{investment_id}",
    response_model=InvestmentResponse,
    summary="Update an investment",
)
@limiter.limit(RATE_LIMIT_WRITE)
def update_investment(
        request: Request,  # Required for rate limiter
        investment_id: int,
        data: InvestmentUpdate,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> Investment:
    """Partial update; typically used to refresh currentPrice."""
    return investment_service.update(
        db, identity.user_id, investment_id, data.model_dump(exclude_unset=True, exclude_none=True),
    )


@router.delete(
    "/{investment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an investment",
)
@limiter.limit(RATE_LIMIT_WRITE)
def delete_investment(
        request: Request,  # Required for rate limiter
        investment_id: int,
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
) -> None:
    investment_service.delete(db, identity.user_id, investment_id)
    return None
