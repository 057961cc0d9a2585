# backend/finengine/schemas/exchange_rates.py
"""
Pydantic schemas for exchange-rate snapshots.

The dashboard stores one snapshot of six directed rates and sends them
keyed the way they are displayed ("SGD_TO_USD"). Rate convention:
1 FROM = rate × TO.
"""

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from finengine.models import RateSource
from finengine.services.currency_converter import ExchangeRateSet


class ExchangeRateSetInput(BaseModel):
    """Schema for a complete exchange-rate snapshot."""

    sgd_to_usd: Decimal = Field(..., gt=0, alias="SGD_TO_USD", description="1 SGD = X USD")
    sgd_to_inr: Decimal = Field(..., gt=0, alias="SGD_TO_INR", description="1 SGD = X INR")
    usd_to_sgd: Decimal = Field(..., gt=0, alias="USD_TO_SGD", description="1 USD = X SGD")
    usd_to_inr: Decimal = Field(..., gt=0, alias="USD_TO_INR", description="1 USD = X INR")
    inr_to_sgd: Decimal = Field(..., gt=0, alias="INR_TO_SGD", description="1 INR = X SGD")
    inr_to_usd: Decimal = Field(..., gt=0, alias="INR_TO_USD", description="1 INR = X USD")

    source: Literal["manual", "live"] = Field(
        default="manual",
        description="'manual' for user overrides, 'live' for fetched rates"
    )
    updated_at: dt.datetime | None = Field(
        default=None,
        description="When the snapshot was taken"
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_rate_set(self) -> ExchangeRateSet:
        """Convert to the engine's ExchangeRateSet."""
        return ExchangeRateSet(
            rates={
                "SGD_TO_USD": self.sgd_to_usd,
                "SGD_TO_INR": self.sgd_to_inr,
                "USD_TO_SGD": self.usd_to_sgd,
                "USD_TO_INR": self.usd_to_inr,
                "INR_TO_SGD": self.inr_to_sgd,
                "INR_TO_USD": self.inr_to_usd,
            },
            source=RateSource(self.source),
            updated_at=self.updated_at,
        )
