# backend/finengine/schemas/records.py
"""
Pydantic schemas for yearly records and monthly snapshots.

Derived fields (market gains, return percent, savings rate) are not
accepted here; the engine always recomputes them.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from finengine.models import Confidence, MonthlySnapshot, Provenance, YearlyRecord
from finengine.schemas.validators import MAX_YEAR, MIN_YEAR


class YearlyRecordInput(BaseModel):
    """
    Schema for a yearly record typed in by the user.

    savings defaults to income - expenses when omitted.
    """

    year: int = Field(..., ge=MIN_YEAR, le=MAX_YEAR)
    income: Decimal = Field(..., ge=0)
    expenses: Decimal = Field(..., ge=0)
    savings: Decimal | None = Field(
        default=None,
        description="Savings for the year (may be negative); defaults to income - expenses"
    )
    net_worth: Decimal = Field(..., description="Net worth at year end")
    srs_contribution: Decimal = Field(default=Decimal("0"), ge=0)
    provenance: Provenance = Provenance.USER_ENTERED
    confidence: Confidence = Confidence.MEDIUM
    notes: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def default_savings(self) -> "YearlyRecordInput":
        if self.savings is None:
            self.savings = self.income - self.expenses
        return self

    def to_record(self) -> YearlyRecord:
        """Convert to the engine's YearlyRecord."""
        return YearlyRecord(
            year=self.year,
            income=self.income,
            expenses=self.expenses,
            savings=self.savings,
            net_worth=self.net_worth,
            srs_contribution=self.srs_contribution,
            provenance=self.provenance,
            confidence=self.confidence,
            notes=self.notes,
        )


class MonthlySnapshotInput(BaseModel):
    """Schema for one month's figures."""

    year: int = Field(..., ge=MIN_YEAR, le=MAX_YEAR)
    month: int = Field(..., ge=1, le=12)
    income: Decimal = Field(..., ge=0)
    expenses: Decimal = Field(..., ge=0)
    portfolio_value: Decimal = Field(..., ge=0)
    net_worth: Decimal
    notes: str | None = Field(default=None, max_length=1000)

    def to_snapshot(self) -> MonthlySnapshot:
        """Convert to the engine's MonthlySnapshot."""
        return MonthlySnapshot(
            year=self.year,
            month=self.month,
            income=self.income,
            expenses=self.expenses,
            portfolio_value=self.portfolio_value,
            net_worth=self.net_worth,
            notes=self.notes,
        )
