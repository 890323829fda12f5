# backend/fintrack/schemas/transactions.py
"""
Pydantic schemas for income/expense transactions.

- Create: what clients must send
- Update: partial update, every field optional
- Response: what the API returns

All money values use Decimal. Never use float for money!
"""

import datetime as dt
from decimal import Decimal

from pydantic import ConfigDict, Field, field_validator

from fintrack.models import TransactionType
from fintrack.schemas.base import CamelModel


class TransactionCreate(CamelModel):
    """Request body for recording a transaction."""

    type: TransactionType = Field(
        ...,
        description="income or expense",
        examples=["expense"],
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=2,
        description="Amount (always positive; type gives the direction)",
        examples=["42.50"],
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        examples=["Groceries"],
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        examples=["Weekly shop"],
    )
    date: dt.date = Field(
        ...,
        description="Date the money moved",
        examples=["2026-01-15"],
    )

    @field_validator("category", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Trim whitespace and reject blank values."""
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class TransactionUpdate(CamelModel):
    """Partial update. Omitted fields remain unchanged."""

    type: TransactionType | None = None
    amount: Decimal | None = Field(default=None, gt=0, max_digits=18, decimal_places=2)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    date: dt.date | None = None


class TransactionResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: TransactionType
    amount: Decimal
    category: str
    description: str
    date: dt.date
    created_at: dt.datetime
    updated_at: dt.datetime
