# backend/finengine/services/__init__.py
"""
Service layer for the valuation and aggregation engine.

Services:
- Have NO knowledge of HTTP, persistence or authentication
- Raise domain-specific exceptions
- Receive every input as a parameter (no ambient user or session)
- Are easily testable via dependency injection

Usage:
    from finengine.services import FinancialEngine, UserDataSet
    from finengine.services import CurrencyConverter, ExchangeRateSet
    from finengine.services import (
        InvalidCurrencyError,
        MissingRateError,
        InvalidLotError,
    )

Architecture:
    services/
    ├── __init__.py              # This file - main exports
    ├── exceptions.py            # Domain exceptions
    ├── constants.py             # Business constants and defaults
    ├── protocols.py             # Service interfaces (Protocol classes)
    ├── currency_converter.py    # SGD / USD / INR conversion
    ├── valuation/               # Cost basis + portfolio valuation
    │   ├── calculators.py       # CostBasisTracker
    │   ├── service.py           # PortfolioValuator
    │   └── types.py             # Valuation data types
    ├── analytics/               # Year-over-year performance
    │   ├── returns.py           # Metric functions + MetricsCalculator
    │   ├── aggregation.py       # MonthlyAggregator
    │   ├── service.py           # PerformanceService
    │   └── types.py             # Analytics data types
    └── engine.py                # FinancialEngine (one full evaluation)
"""

from finengine.services.exceptions import (
    ServiceError,
    ValidationError,
    InvalidLotError,
    InvalidPriceError,
    DuplicateRecordError,
    FXRateError,
    InvalidCurrencyError,
    MissingRateError,
)
from finengine.services.currency_converter import (
    CurrencyConverter,
    CurrencyValues,
    ExchangeRateSet,
)
from finengine.services.valuation import CostBasisTracker, PortfolioValuator
from finengine.services.analytics import (
    MetricsCalculator,
    MonthlyAggregator,
    PerformanceService,
)
from finengine.services.engine import EngineReport, FinancialEngine, UserDataSet

__all__ = [
    # Exceptions
    "ServiceError",
    "ValidationError",
    "InvalidLotError",
    "InvalidPriceError",
    "DuplicateRecordError",
    "FXRateError",
    "InvalidCurrencyError",
    "MissingRateError",
    # Currency
    "CurrencyConverter",
    "CurrencyValues",
    "ExchangeRateSet",
    # Valuation
    "CostBasisTracker",
    "PortfolioValuator",
    # Analytics
    "MetricsCalculator",
    "MonthlyAggregator",
    "PerformanceService",
    # Engine
    "FinancialEngine",
    "UserDataSet",
    "EngineReport",
]
