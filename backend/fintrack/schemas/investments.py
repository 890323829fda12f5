# backend/fintrack/schemas/investments.py
"""
Pydantic schemas for investment holdings.

Prices and quantities use Decimal with 8 decimal places so fractional
crypto holdings round-trip exactly.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import ConfigDict, Field, field_validator

from fintrack.models import InvestmentType
from fintrack.schemas.base import CamelModel


class InvestmentCreate(CamelModel):
    """Request body for recording a holding."""

    symbol: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Ticker or coin symbol (stored uppercase)",
        examples=["AAPL", "BTC"],
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        examples=["Apple Inc."],
    )
    type: InvestmentType = Field(
        ...,
        description="stock, crypto or mutual_fund",
    )
    quantity: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=8,
        examples=["10", "0.5"],
    )
    purchase_price: Decimal = Field(
        ...,
        ge=0,
        max_digits=18,
        decimal_places=8,
        description="Price per unit at purchase",
    )
    current_price: Decimal = Field(
        ...,
        ge=0,
        max_digits=18,
        decimal_places=8,
        description="Latest known price per unit (entered manually)",
    )
    purchase_date: date

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        """Uppercase and trim symbol."""
        v = v.strip().upper()
        if not v:
            raise ValueError("Symbol must not be blank")
        return v


class InvestmentUpdate(CamelModel):
    """Partial update. Omitted fields remain unchanged."""

    symbol: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    type: InvestmentType | None = None
    quantity: Decimal | None = Field(default=None, gt=0, max_digits=18, decimal_places=8)
    purchase_price: Decimal | None = Field(default=None, ge=0, max_digits=18, decimal_places=8)
    current_price: Decimal | None = Field(default=None, ge=0, max_digits=18, decimal_places=8)
    purchase_date: date | None = None

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().upper()
        if not v:
            raise ValueError("Symbol must not be blank")
        return v


class InvestmentResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    symbol: str
    name: str
    type: InvestmentType
    quantity: Decimal
    purchase_price: Decimal
    current_price: Decimal
    purchase_date: date
    created_at: datetime
    updated_at: datetime
