# backend/finengine/schemas/holdings.py
"""
Pydantic schemas for holdings and lots.

Validation layers:
- Field constraints: type, length, numeric limits
- Field validators: normalization (uppercase, trim)
- Engine: cost-basis and reconciliation rules

IMPORTANT: All financial values use Decimal for precision.
Never use float for money!
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from finengine.models import Currency, Holding
from finengine.schemas.validators import validate_currency, validate_symbol
from finengine.services.valuation.types import LotEvent


class HoldingInput(BaseModel):
    """
    Schema for one holding as stored by the dashboard.

    quantity / unit_cost / current_unit_price are optional: value-only
    holdings (cash, CPF, property) only carry stored values.
    """

    id: str = Field(..., min_length=1, max_length=64)
    symbol: str = Field(..., description="Ticker or short label", examples=["VWRA", "CPF-OA"])
    currency: str = Field(..., description="Native currency (SGD, USD or INR)")
    category: str = Field(..., min_length=1, max_length=50, examples=["Core", "Growth"])
    name: str | None = Field(default=None, max_length=200)

    value_sgd: Decimal = Field(default=Decimal("0"), ge=0)
    value_usd: Decimal = Field(default=Decimal("0"), ge=0)
    value_inr: Decimal = Field(default=Decimal("0"), ge=0)

    quantity: Decimal | None = Field(default=None, ge=0)
    unit_cost: Decimal | None = Field(default=None, ge=0)
    current_unit_price: Decimal | None = Field(default=None, ge=0)
    price_source: str | None = Field(default=None, max_length=50)
    price_updated: datetime | None = None

    # =========================================================================
    # FIELD VALIDATORS
    # =========================================================================

    @field_validator('symbol')
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return validate_symbol(v)

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return validate_currency(v)

    @field_validator('category')
    @classmethod
    def strip_category(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Category cannot be blank")
        return stripped

    def to_holding(self) -> Holding:
        """Convert to the engine's Holding."""
        return Holding(
            id=self.id,
            symbol=self.symbol,
            currency=Currency(self.currency),
            category=self.category,
            value_sgd=self.value_sgd,
            value_usd=self.value_usd,
            value_inr=self.value_inr,
            quantity=self.quantity,
            unit_cost=self.unit_cost,
            current_unit_price=self.current_unit_price,
            price_source=self.price_source,
            price_updated=self.price_updated,
            name=self.name,
        )


class LotInput(BaseModel):
    """Schema for a purchase added to an existing holding."""

    quantity: Decimal = Field(
        ...,
        gt=0,
        description="Units bought (must be positive)",
        examples=["200", "0.5"]
    )
    unit_cost: Decimal = Field(
        ...,
        ge=0,
        description="Price paid per unit, in the holding's currency",
        examples=["15.00"]
    )

    def to_lot(self) -> LotEvent:
        return LotEvent(quantity=self.quantity, unit_cost=self.unit_cost)
