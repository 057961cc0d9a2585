# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Exchange-rate snapshots (complete and partial)
- Holding / record / snapshot factories
- Calculator instances with explicit tolerances
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Iterator

import pytest

from finengine.models import (
    Currency,
    Holding,
    MonthlySnapshot,
    YearlyRecord,
)
from finengine.services.analytics import MetricsCalculator, MonthlyAggregator
from finengine.services.currency_converter import CurrencyConverter, ExchangeRateSet
from finengine.services.valuation import CostBasisTracker, PortfolioValuator
from finengine.utils.context import clear_correlation_id


# =============================================================================
# EXCHANGE RATES
# =============================================================================

RATES_AS_OF = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def rates() -> ExchangeRateSet:
    """Complete six-rate snapshot with round numbers."""
    return ExchangeRateSet.from_mapping(
        {
            "SGD_TO_USD": "0.75",
            "SGD_TO_INR": "62",
            "USD_TO_SGD": "1.35",
            "USD_TO_INR": "83",
            "INR_TO_SGD": "0.016",
            "INR_TO_USD": "0.012",
        },
        source="live",
        updated_at=RATES_AS_OF,
    )


@pytest.fixture
def usd_only_rates() -> ExchangeRateSet:
    """Partial snapshot: only conversions out of USD."""
    return ExchangeRateSet.from_mapping({"USD_TO_SGD": "1.35", "USD_TO_INR": "83"})


@pytest.fixture
def converter() -> CurrencyConverter:
    return CurrencyConverter()


# =============================================================================
# FACTORIES
# =============================================================================

@pytest.fixture
def make_holding() -> Callable[..., Holding]:
    """Factory for holdings; USD / Core by default."""

    def _make(
            symbol: str = "VWRA",
            currency: Currency = Currency.USD,
            category: str = "Core",
            **overrides,
    ) -> Holding:
        holding_id = overrides.pop("id", f"h-{symbol.lower()}")
        return Holding(
            id=holding_id,
            symbol=symbol,
            currency=currency,
            category=category,
            **overrides,
        )

    return _make


@pytest.fixture
def make_record() -> Callable[..., YearlyRecord]:
    """Factory for yearly records from plain numbers."""

    def _make(year: int, income, expenses, savings, net_worth, **overrides) -> YearlyRecord:
        return YearlyRecord(
            year=year,
            income=Decimal(str(income)),
            expenses=Decimal(str(expenses)),
            savings=Decimal(str(savings)),
            net_worth=Decimal(str(net_worth)),
            **overrides,
        )

    return _make


@pytest.fixture
def make_snapshot() -> Callable[..., MonthlySnapshot]:
    """Factory for monthly snapshots from plain numbers."""

    def _make(year: int, month: int, income, expenses, net_worth, portfolio_value=0) -> MonthlySnapshot:
        return MonthlySnapshot(
            year=year,
            month=month,
            income=Decimal(str(income)),
            expenses=Decimal(str(expenses)),
            portfolio_value=Decimal(str(portfolio_value)),
            net_worth=Decimal(str(net_worth)),
        )

    return _make


# =============================================================================
# CALCULATORS
# =============================================================================

@pytest.fixture
def tracker(converter) -> CostBasisTracker:
    """Tracker with the standard 1% / 10 tolerances, independent of .env."""
    return CostBasisTracker(
        converter=converter,
        tolerance_percent=Decimal("1"),
        tolerance_absolute=Decimal("10"),
    )


@pytest.fixture
def valuator(converter) -> PortfolioValuator:
    return PortfolioValuator(converter=converter, rebalance_threshold=Decimal("5"))


@pytest.fixture
def aggregator() -> MonthlyAggregator:
    """Aggregator with the historical non-negative clamp."""
    return MonthlyAggregator(clamp_market_gains=True)


@pytest.fixture
def metrics() -> MetricsCalculator:
    return MetricsCalculator()


# =============================================================================
# CONTEXT
# =============================================================================

@pytest.fixture(autouse=True)
def reset_correlation_id() -> Iterator[None]:
    """Each test starts and ends without a correlation ID."""
    clear_correlation_id()
    yield
    clear_correlation_id()
