# backend/finengine/services/valuation/types.py
"""
Internal data types for the valuation layer.

These dataclasses are returned by CostBasisTracker and PortfolioValuator.
They are NOT Pydantic schemas - input validation lives in finengine/schemas.

Design Principles:
- Immutable (frozen=True), a new holding is returned instead of mutating one
- Use Decimal for ALL financial values (never float)
- Optional fields use None, not sentinel values
- Diagnostics are data: a mismatch is a report, not an exception

Type Hierarchy:
    LotEvent              - Quantity + price of a new purchase
    LotResult             - Combined quantity and weighted unit cost
    CostBasisUpdate       - Holding after a lot, plus previous figures
    ReconciliationReport  - Stored vs calculated value diagnostic
    ReconciliationFix     - Audit record of a fix-mode correction
    HoldingValuation      - One holding in all three currencies
    PortfolioSnapshot     - Totals by category / currency
    AllocationDrift       - One category vs its target
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from finengine.models import Currency, Holding, RateSource
from finengine.services.currency_converter import CurrencyValues


# =============================================================================
# COST BASIS
# =============================================================================

@dataclass(frozen=True)
class LotEvent:
    """
    A purchase applied to a holding's cost basis.

    Ephemeral: consumed immediately into the holding's weighted unit cost.

    Attributes:
        quantity: Units bought (must be > 0)
        unit_cost: Price paid per unit, native currency (must be >= 0)
    """

    quantity: Decimal
    unit_cost: Decimal


@dataclass(frozen=True)
class LotResult:
    """
    Position after a lot has been applied.

    Attributes:
        quantity: existing + new quantity
        unit_cost: Weighted-average unit cost (full precision)

    Formula:
        unit_cost = (q_old × c_old + q_new × c_new) / (q_old + q_new)
    """

    quantity: Decimal
    unit_cost: Decimal

    @property
    def total_invested(self) -> Decimal:
        """Total cost of the combined position."""
        return self.quantity * self.unit_cost


@dataclass(frozen=True)
class CostBasisUpdate:
    """
    Result of applying a lot to a Holding.

    Attributes:
        holding: New holding with quantity and unit_cost updated
        lot: The lot that was applied
        result: Combined quantity / weighted cost
        previous_quantity: Quantity before the lot (0 for value-only holdings)
        previous_unit_cost: Unit cost before the lot (0 if none was recorded)

    Note:
        current_unit_price, price_source, price_updated and the stored
        values are carried over untouched.
    """

    holding: Holding
    lot: LotEvent
    result: LotResult
    previous_quantity: Decimal
    previous_unit_cost: Decimal


# =============================================================================
# RECONCILIATION
# =============================================================================

class ReconciliationStatus(str, enum.Enum):
    CONSISTENT = "consistent"
    INCONSISTENT = "inconsistent"
    # Value-only holding, or no current price: nothing to compare
    UNPRICED = "unpriced"


@dataclass(frozen=True)
class ReconciliationReport:
    """
    Stored vs calculated value for one holding.

    Attributes:
        holding_id: Holding identifier
        symbol: Holding symbol
        currency: Native currency the comparison is made in
        status: CONSISTENT, INCONSISTENT or UNPRICED
        calculated_value: quantity × current_unit_price (None if unpriced)
        stored_value: Stored value in the native currency
        delta: calculated - stored (None if unpriced)
        delta_percent: |delta| / calculated × 100
            (None if unpriced, or calculated is 0)
        price_change_percent: current price vs unit cost, % (None if unknown)
        large_price_move: price_change_percent beyond the large-move limit
        missing_price_source: Priced holding with no price_source tag

    Note:
        An INCONSISTENT status is expected while a price refresh is
        pending. It never raises.
    """

    holding_id: str
    symbol: str
    currency: Currency
    status: ReconciliationStatus
    calculated_value: Decimal | None
    stored_value: Decimal
    delta: Decimal | None
    delta_percent: Decimal | None
    price_change_percent: Decimal | None = None
    large_price_move: bool = False
    missing_price_source: bool = False

    @property
    def consistent(self) -> bool:
        """False only for INCONSISTENT; unpriced holdings have nothing to flag."""
        return self.status != ReconciliationStatus.INCONSISTENT


@dataclass(frozen=True)
class ReconciliationFix:
    """
    Audit record written by fix mode.

    Attributes:
        holding: Corrected holding (or the original when nothing changed)
        report: Reconciliation report that triggered the fix
        previous_values: Stored values before the fix
        corrected_values: Stored values after the fix
        applied: True if the holding was changed
        fixed_at: Timestamp written to price_updated
    """

    holding: Holding
    report: ReconciliationReport
    previous_values: CurrencyValues
    corrected_values: CurrencyValues
    applied: bool
    fixed_at: datetime | None = None


# =============================================================================
# PORTFOLIO VALUATION
# =============================================================================

@dataclass(frozen=True)
class HoldingValuation:
    """
    One holding expressed in all three currencies.

    Attributes:
        holding_id: Holding identifier
        symbol: Holding symbol
        category: Allocation category
        currency: Native currency
        native_value: Value in the native currency
        values: Value in SGD / USD / INR
        is_calculated: True if native_value came from quantity × price,
            False if the stored native value was used
    """

    holding_id: str
    symbol: str
    category: str
    currency: Currency
    native_value: Decimal
    values: CurrencyValues
    is_calculated: bool


@dataclass(frozen=True)
class PortfolioSnapshot:
    """
    Multi-currency snapshot of the whole portfolio.

    Attributes:
        display_currency: Currency of total / by_category / by_currency
        total: Grand total in display_currency
        by_category: Category name → value; known categories always present
        by_currency: Native currency → value of holdings priced in it,
            expressed in display_currency; all three currencies present
        totals: Grand total in every currency
        holdings: Per-holding valuations, input order
        rate_source: Source tag of the rate set used
        rates_updated_at: Timestamp of the rate set used
    """

    display_currency: Currency
    total: Decimal
    by_category: dict[str, Decimal]
    by_currency: dict[Currency, Decimal]
    totals: CurrencyValues
    holdings: list[HoldingValuation] = field(default_factory=list)
    rate_source: RateSource | None = None
    rates_updated_at: datetime | None = None

    @property
    def holding_count(self) -> int:
        return len(self.holdings)


# =============================================================================
# ALLOCATION
# =============================================================================

class AllocationStatus(str, enum.Enum):
    ON_TRACK = "on_track"
    UNDERWEIGHT = "underweight"
    OVERWEIGHT = "overweight"


@dataclass(frozen=True)
class AllocationDrift:
    """
    One category's current share against its target.

    Attributes:
        category: Category name
        current_value: Category value in the snapshot's display currency
        current_pct: current_value / total × 100 (0 when total is 0)
        target_pct: Target share
        drift_pct: current_pct - target_pct
        drift_amount: drift_pct / 100 × total (positive = over target)
        completion_pct: current_pct / target_pct × 100 (0 when target is 0)
        needs_rebalance: |drift_pct| > rebalance threshold
        status: ON_TRACK inside the threshold, otherwise UNDER/OVERWEIGHT
    """

    category: str
    current_value: Decimal
    current_pct: Decimal
    target_pct: Decimal
    drift_pct: Decimal
    drift_amount: Decimal
    completion_pct: Decimal
    needs_rebalance: bool
    status: AllocationStatus
