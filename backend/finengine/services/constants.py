# backend/finengine/services/constants.py
"""
Centralized constants for the engine services.

Single source of truth for the business constants used across
calculators. Values that users may want to tune at deploy time (reconciliation
tolerances, rebalance threshold) are read from finengine.config.Settings,
whose defaults mirror the named values here.

Usage:
    from finengine.services.constants import (
        ZERO,
        HUNDRED,
        DEFAULT_REBALANCE_THRESHOLD,
    )
"""

from decimal import Decimal

from finengine.models import (
    CATEGORY_CORE,
    CATEGORY_GROWTH,
    CATEGORY_HEDGE,
    CATEGORY_LIQUIDITY,
)

# Numeric helpers live beside the Decimal utilities; re-exported for calculators
from finengine.utils.money import HUNDRED, ZERO


# =============================================================================
# RECONCILIATION
# =============================================================================

# A priced holding is flagged when quantity × price diverges from its stored
# native value by more than EITHER tolerance. Heuristic carried over from the
# dashboard's consistency script; Settings defaults mirror these values and
# deployments override them there.
DEFAULT_RECONCILIATION_TOLERANCE_PERCENT: Decimal = Decimal("1")
DEFAULT_RECONCILIATION_TOLERANCE_ABSOLUTE: Decimal = Decimal("10")

# Current price vs weighted cost move (%) reported as "large"
LARGE_PRICE_MOVE_PERCENT: Decimal = Decimal("50")

# priceSource tag written by the reconciliation fix mode
CONSISTENCY_FIX_SOURCE: str = "consistency_fix"


# =============================================================================
# ALLOCATION
# =============================================================================

# Drift (percentage points) beyond which a category needs rebalancing
DEFAULT_REBALANCE_THRESHOLD: Decimal = Decimal("5")

# Default target split (percent), sums to 100
DEFAULT_ALLOCATION_TARGETS: dict[str, Decimal] = {
    CATEGORY_CORE: Decimal("25"),
    CATEGORY_GROWTH: Decimal("55"),
    CATEGORY_HEDGE: Decimal("10"),
    CATEGORY_LIQUIDITY: Decimal("10"),
}


# =============================================================================
# EXCHANGE RATES
# =============================================================================

# Directed rate key format, e.g. "SGD_TO_USD"
RATE_KEY_TEMPLATE: str = "{from_currency}_TO_{to_currency}"
