# backend/finengine/schemas/allocation.py
"""
Pydantic schemas for allocation targets.

Four category targets that must add up to 100, plus the drift threshold
used to flag categories for rebalancing.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from finengine.models import (
    AllocationTargets,
    CATEGORY_CORE,
    CATEGORY_GROWTH,
    CATEGORY_HEDGE,
    CATEGORY_LIQUIDITY,
)
from finengine.services.constants import (
    DEFAULT_ALLOCATION_TARGETS,
    DEFAULT_REBALANCE_THRESHOLD,
)

TARGET_TOTAL = Decimal("100")


class AllocationTargetsInput(BaseModel):
    """Schema for a user's target allocation (percent per category)."""

    core: Decimal = Field(default=DEFAULT_ALLOCATION_TARGETS[CATEGORY_CORE], ge=0, le=100)
    growth: Decimal = Field(default=DEFAULT_ALLOCATION_TARGETS[CATEGORY_GROWTH], ge=0, le=100)
    hedge: Decimal = Field(default=DEFAULT_ALLOCATION_TARGETS[CATEGORY_HEDGE], ge=0, le=100)
    liquidity: Decimal = Field(default=DEFAULT_ALLOCATION_TARGETS[CATEGORY_LIQUIDITY], ge=0, le=100)

    rebalance_threshold: Decimal = Field(
        default=DEFAULT_REBALANCE_THRESHOLD,
        ge=0,
        le=100,
        description="Drift in percentage points before a category needs rebalancing"
    )

    @model_validator(mode="after")
    def validate_total(self) -> "AllocationTargetsInput":
        """Targets must add up to exactly 100%."""
        total = self.core + self.growth + self.hedge + self.liquidity
        if total != TARGET_TOTAL:
            raise ValueError(f"Allocation targets must sum to 100, got {total}")
        return self

    def as_targets(self) -> AllocationTargets:
        """Convert to the engine's AllocationTargets."""
        return AllocationTargets(
            targets={
                CATEGORY_CORE: self.core,
                CATEGORY_GROWTH: self.growth,
                CATEGORY_HEDGE: self.hedge,
                CATEGORY_LIQUIDITY: self.liquidity,
            },
            rebalance_threshold=self.rebalance_threshold,
        )
