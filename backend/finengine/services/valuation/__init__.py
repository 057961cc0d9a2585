# backend/finengine/services/valuation/__init__.py
"""
Valuation Package.

This package turns holdings and an exchange-rate snapshot into values:
- Weighted-average cost basis on new lots (CostBasisTracker.apply_lot)
- Market price refresh (CostBasisTracker.set_current_price)
- Stored vs calculated value diagnostics (CostBasisTracker.reconcile)
- Multi-currency portfolio snapshot (PortfolioValuator.aggregate)
- Allocation drift against targets (PortfolioValuator.allocation_drift)

Usage:
    from finengine.services.valuation import CostBasisTracker, PortfolioValuator

    tracker = CostBasisTracker()
    result = tracker.apply_lot(500, "4.40", 200, "15.00")

    valuator = PortfolioValuator()
    snapshot = valuator.aggregate(holdings, rates, "SGD")
    drift = valuator.allocation_drift(snapshot)

Architecture:
    valuation/
    ├── __init__.py              # This file - package exports
    ├── types.py                 # Internal data classes
    ├── calculators.py           # CostBasisTracker
    └── service.py               # PortfolioValuator

Data Flow:
    Lot + Holding → CostBasisTracker → CostBasisUpdate
    Holding + Rates → PortfolioValuator.value_holding → HoldingValuation
    All HoldingValuations → PortfolioSnapshot → AllocationDrift rows
"""

from finengine.services.valuation.calculators import CostBasisTracker
from finengine.services.valuation.service import PortfolioValuator
from finengine.services.valuation.types import (
    AllocationDrift,
    AllocationStatus,
    CostBasisUpdate,
    HoldingValuation,
    LotEvent,
    LotResult,
    PortfolioSnapshot,
    ReconciliationFix,
    ReconciliationReport,
    ReconciliationStatus,
)

__all__ = [
    # Services
    "CostBasisTracker",
    "PortfolioValuator",
    # Types
    "LotEvent",
    "LotResult",
    "CostBasisUpdate",
    "ReconciliationStatus",
    "ReconciliationReport",
    "ReconciliationFix",
    "HoldingValuation",
    "PortfolioSnapshot",
    "AllocationStatus",
    "AllocationDrift",
]
