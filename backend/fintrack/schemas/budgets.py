# backend/fintrack/schemas/budgets.py
"""Pydantic schemas for spending budgets."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import ConfigDict, Field, model_validator

from fintrack.models import BudgetPeriod
from fintrack.schemas.base import CamelModel


class BudgetCreate(CamelModel):
    """Request body for creating a budget."""

    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        examples=["Dining out"],
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=2,
        description="Spending limit for the period",
        examples=["300.00"],
    )
    period: BudgetPeriod = Field(
        default=BudgetPeriod.MONTHLY,
        description="monthly, weekly or custom",
    )
    start_date: date = Field(..., examples=["2026-01-01"])
    end_date: date = Field(..., examples=["2026-01-31"])

    @model_validator(mode="after")
    def validate_date_range(self) -> "BudgetCreate":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class BudgetUpdate(CamelModel):
    """
    Partial update. Omitted fields remain unchanged.

    When both dates are sent they must form a valid range; a single date
    is checked against the stored record by the router.
    """

    category: str | None = Field(default=None, min_length=1, max_length=100)
    amount: Decimal | None = Field(default=None, gt=0, max_digits=18, decimal_places=2)
    period: BudgetPeriod | None = None
    start_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def validate_date_range(self) -> "BudgetUpdate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class BudgetResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    amount: Decimal
    period: BudgetPeriod
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime
