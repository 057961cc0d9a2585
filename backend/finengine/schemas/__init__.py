# backend/finengine/schemas/__init__.py
"""
Pydantic schemas for validating engine input at the boundary.

This package contains the input schemas organized by domain:
- allocation: Target split across Core / Growth / Hedge / Liquidity
- exchange_rates: Six-rate exchange snapshot
- holdings: Holdings and purchase lots
- records: Yearly records and monthly snapshots
- validators: Reusable validation functions (currency, symbol)

Each schema converts into the engine's dataclasses (to_holding(),
to_rate_set(), ...), so callers validate untrusted data once and hand
plain Decimal-typed objects to the services.

Usage:
    from finengine.schemas import HoldingInput, ExchangeRateSetInput

    holding = HoldingInput.model_validate(row).to_holding()
    rates = ExchangeRateSetInput.model_validate(payload).to_rate_set()
"""

from finengine.schemas.allocation import AllocationTargetsInput
from finengine.schemas.exchange_rates import ExchangeRateSetInput
from finengine.schemas.holdings import HoldingInput, LotInput
from finengine.schemas.records import MonthlySnapshotInput, YearlyRecordInput

__all__ = [
    "AllocationTargetsInput",
    "ExchangeRateSetInput",
    "HoldingInput",
    "LotInput",
    "YearlyRecordInput",
    "MonthlySnapshotInput",
]
