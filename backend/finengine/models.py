# backend/finengine/models.py
"""
Domain entities consumed and produced by the engine.

These are plain frozen dataclasses, not ORM models. Persistence belongs to
the caller: it loads rows, builds these objects, runs the engine and stores
whatever comes back. Updates always return a new instance
(``dataclasses.replace``) so caller-owned state is never mutated in place.

All money, quantity and rate fields are Decimal.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


# Enums mirror the string values the dashboard stores
class Currency(str, enum.Enum):
    SGD = "SGD"
    USD = "USD"
    INR = "INR"


class RateSource(str, enum.Enum):
    """Where an exchange-rate snapshot came from."""
    MANUAL = "manual"
    LIVE = "live"


class Provenance(str, enum.Enum):
    """
    How a yearly record's figures were produced.

    USER_ENTERED: Typed in directly by the user
    MONTHLY_ROLLUP: Derived from that year's monthly snapshots
    ESTIMATED: Back-filled estimate (e.g., from a partial year)
    """
    USER_ENTERED = "user_entered"
    MONTHLY_ROLLUP = "monthly_rollup"
    ESTIMATED = "estimated"


class Confidence(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Allocation buckets used by the dashboard
CATEGORY_CORE = "Core"
CATEGORY_GROWTH = "Growth"
CATEGORY_HEDGE = "Hedge"
CATEGORY_LIQUIDITY = "Liquidity"

PORTFOLIO_CATEGORIES: tuple[str, ...] = (
    CATEGORY_CORE,
    CATEGORY_GROWTH,
    CATEGORY_HEDGE,
    CATEGORY_LIQUIDITY,
)


@dataclass(frozen=True)
class Holding:
    """
    A single position (or value-only asset) in the user's portfolio.

    Attributes:
        id: Caller's identifier for the holding
        symbol: Ticker or short label (e.g., "VWRA", "CPF-OA")
        currency: Native currency the holding is priced in
        category: Allocation category name (e.g., "Core")
        value_sgd / value_usd / value_inr: Stored value in each currency
        quantity: Units held, None for value-only holdings
        unit_cost: Weighted-average cost per unit (native currency)
        current_unit_price: Latest market or manual price (native currency)
        price_source: Tag of whoever set current_unit_price ("manual", "fmp", ...)
        price_updated: When current_unit_price was set
        name: Display name

    Note:
        When quantity and current_unit_price are both present the stored
        native value should be close to quantity × current_unit_price.
        Divergence is reported by reconciliation, never silently corrected.
    """

    id: str
    symbol: str
    currency: Currency
    category: str
    value_sgd: Decimal = Decimal("0")
    value_usd: Decimal = Decimal("0")
    value_inr: Decimal = Decimal("0")
    quantity: Decimal | None = None
    unit_cost: Decimal | None = None
    current_unit_price: Decimal | None = None
    price_source: str | None = None
    price_updated: datetime | None = None
    name: str | None = None

    @property
    def is_priced(self) -> bool:
        """True if the holding tracks units and has a current price."""
        return self.quantity is not None and self.current_unit_price is not None

    def stored_value(self, currency: Currency) -> Decimal:
        """Stored value in the requested currency."""
        if currency == Currency.SGD:
            return self.value_sgd
        if currency == Currency.USD:
            return self.value_usd
        return self.value_inr

    @property
    def stored_native_value(self) -> Decimal:
        """Stored value in the holding's own currency."""
        return self.stored_value(self.currency)


@dataclass(frozen=True)
class YearlyRecord:
    """
    One year of a user's finances.

    Attributes:
        year: Calendar year (unique per user)
        income / expenses / savings: Flows for the year
        net_worth: Point-in-time balance at year end
        market_gains: Derived - net worth change not explained by savings
        return_percent: Derived - market_gains relative to the base balance
        savings_rate: Derived - savings / income × 100
        srs_contribution: Supplementary Retirement Scheme top-up for the year
        provenance: Where the figures came from
        confidence: How much the user trusts the figures
        notes: Free text
    """

    year: int
    income: Decimal
    expenses: Decimal
    savings: Decimal
    net_worth: Decimal
    market_gains: Decimal | None = None
    return_percent: Decimal | None = None
    savings_rate: Decimal | None = None
    srs_contribution: Decimal = Decimal("0")
    provenance: Provenance = Provenance.USER_ENTERED
    confidence: Confidence = Confidence.MEDIUM
    notes: str | None = None

    @property
    def is_estimated(self) -> bool:
        return self.provenance == Provenance.ESTIMATED


@dataclass(frozen=True)
class MonthlySnapshot:
    """
    End-of-month figures entered by the user.

    Once a month has a snapshot it is the source of truth for that month,
    and a year with any snapshots is rolled up from them instead of using
    the standalone yearly record.
    """

    year: int
    month: int
    income: Decimal
    expenses: Decimal
    portfolio_value: Decimal
    net_worth: Decimal
    notes: str | None = None

    @property
    def savings(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True)
class AllocationTargets:
    """
    Target split of the portfolio across categories.

    Attributes:
        targets: Category name → target percent (the four defaults sum to 100)
        rebalance_threshold: Drift in percentage points that needs action
    """

    targets: dict[str, Decimal]
    rebalance_threshold: Decimal = Decimal("5")
