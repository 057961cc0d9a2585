# backend/finengine/services/analytics/returns.py
"""
Year-over-year metric functions.

This module contains pure functions for the yearly performance metrics:
- Savings Rate: savings / income
- Market Gains: net worth change not explained by fresh savings
- Return Percent: market gains relative to the base balance
- YTD Performance: live portfolio vs last year's closing net worth
- Overall Gains: live portfolio vs total savings

All functions are stateless. Records are sorted by year before any
derivation; the result depends on that order.

Formulas:
    Savings Rate = savings / income × 100               (0 if income <= 0)

    First year:
        Market Gains   = net_worth - savings
        Return Percent = market_gains / savings × 100    (0 if savings <= 0)

    Later years:
        Market Gains   = net_worth - previous_net_worth - savings
        Return Percent = market_gains / previous_net_worth × 100
                                                         (0 if previous <= 0)

    The first year has no opening balance, so its savings act as the
    amount invested.

Idempotency Note:
    Only savings_rate, market_gains and return_percent are written.
    income, savings and net_worth are read as given, so deriving an already
    derived series again gives the same result. The inputs must be the raw,
    authoritative net-worth figures, never values from some other derivation.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import date
from decimal import Decimal

from finengine.models import YearlyRecord
from finengine.services.analytics.types import OverallGains, YTDPerformance
from finengine.services.constants import HUNDRED, ZERO
from finengine.services.exceptions import DuplicateRecordError

logger = logging.getLogger(__name__)

YTD_TIMEFRAME = "YTD"
YTD_NO_BASELINE_TIMEFRAME = "YTD (no baseline)"


# =============================================================================
# SAVINGS RATE
# =============================================================================

def calculate_savings_rate(income: Decimal, savings: Decimal) -> Decimal:
    """
    Calculate savings as a percentage of income.

    Args:
        income: Income for the period
        savings: Savings for the period (may be negative)

    Returns:
        savings / income × 100, or 0 if income is not positive

    Example:
        >>> calculate_savings_rate(Decimal("80000"), Decimal("20000"))
        Decimal('25.00')
    """
    if income <= ZERO:
        return ZERO
    return savings / income * HUNDRED


# =============================================================================
# YEAR DERIVATION
# =============================================================================

def sort_records(records: Iterable[YearlyRecord]) -> list[YearlyRecord]:
    """
    Sort yearly records ascending by year.

    Raises:
        DuplicateRecordError: If two records share a year
    """
    sorted_records = sorted(records, key=lambda record: record.year)
    for previous, current in zip(sorted_records, sorted_records[1:]):
        if previous.year == current.year:
            raise DuplicateRecordError("yearly record", str(current.year))
    return sorted_records


def derive_year(index: int, sorted_records: Sequence[YearlyRecord]) -> YearlyRecord:
    """
    Derive savings rate, market gains and return percent for one year.

    Args:
        index: Position of the year in sorted_records
        sorted_records: Records sorted ascending by year

    Returns:
        Copy of the record with the three derived fields set

    Raises:
        IndexError: If index is outside sorted_records
    """
    record = sorted_records[index]

    savings_rate = calculate_savings_rate(record.income, record.savings)

    if index == 0:
        market_gains = record.net_worth - record.savings
        return_percent = (
            market_gains / record.savings * HUNDRED
            if record.savings > ZERO else ZERO
        )
    else:
        previous_net_worth = sorted_records[index - 1].net_worth
        market_gains = record.net_worth - previous_net_worth - record.savings
        return_percent = (
            market_gains / previous_net_worth * HUNDRED
            if previous_net_worth > ZERO else ZERO
        )

    return replace(
        record,
        savings_rate=savings_rate,
        market_gains=market_gains,
        return_percent=return_percent,
    )


def calculate_financial_metrics(records: Iterable[YearlyRecord]) -> list[YearlyRecord]:
    """
    Sort records by year and derive every year's metrics.

    Returns:
        New records sorted by year; empty list for no input

    Raises:
        DuplicateRecordError: If two records share a year
    """
    sorted_records = sort_records(records)
    if not sorted_records:
        return []

    derived = [derive_year(index, sorted_records) for index in range(len(sorted_records))]

    logger.debug(
        f"Derived metrics for {len(derived)} years "
        f"({derived[0].year}-{derived[-1].year})"
    )
    return derived


# =============================================================================
# YTD / ALL-TIME PERFORMANCE
# =============================================================================

def calculate_ytd_performance(
        records: Iterable[YearlyRecord],
        current_portfolio_value: Decimal,
        current_year: int | None = None,
) -> YTDPerformance:
    """
    Performance of the live portfolio since last year's close.

    Formula:
        total_gain = current_value - previous_year.net_worth - current_year.savings
        percentage = total_gain / previous_year.net_worth × 100

    Args:
        records: Yearly records (any order)
        current_portfolio_value: Live portfolio value
        current_year: Year treated as "this year" (default: today's year)

    Returns:
        YTDPerformance; zeros with timeframe "YTD (no baseline)" when there
        is no record for the previous year
    """
    year = current_year if current_year is not None else date.today().year
    by_year = {record.year: record for record in records}

    previous = by_year.get(year - 1)
    if previous is None:
        return YTDPerformance(
            total_gain=ZERO,
            percentage_change=ZERO,
            timeframe=YTD_NO_BASELINE_TIMEFRAME,
            starting_value=ZERO,
        )

    current = by_year.get(year)
    current_savings = current.savings if current is not None else ZERO
    starting_value = previous.net_worth

    total_gain = current_portfolio_value - starting_value - current_savings
    percentage = total_gain / starting_value * HUNDRED if starting_value > ZERO else ZERO

    return YTDPerformance(
        total_gain=total_gain,
        percentage_change=percentage,
        timeframe=YTD_TIMEFRAME,
        starting_value=starting_value,
    )


def calculate_overall_gains(
        records: Iterable[YearlyRecord],
        current_portfolio_value: Decimal,
) -> OverallGains:
    """
    All-time gain of the live portfolio over everything saved.

    Formula:
        total_gain = current_value - Σ savings
        percentage = total_gain / Σ savings × 100   (0 if Σ savings <= 0)

    Returns:
        OverallGains; all zeros when there are no records
    """
    records = list(records)
    if not records:
        return OverallGains(total_gain=ZERO, percentage_change=ZERO, total_savings=ZERO)

    total_savings = sum((record.savings for record in records), ZERO)
    total_gain = current_portfolio_value - total_savings
    percentage = total_gain / total_savings * HUNDRED if total_savings > ZERO else ZERO

    return OverallGains(
        total_gain=total_gain,
        percentage_change=percentage,
        total_savings=total_savings,
    )


# =============================================================================
# CALCULATOR
# =============================================================================

class MetricsCalculator:
    """
    Derives yearly performance metrics.

    Object facade over the module functions, injected into
    PerformanceService.
    """

    def savings_rate(self, income: Decimal, savings: Decimal) -> Decimal:
        return calculate_savings_rate(income, savings)

    def derive_year(self, index: int, sorted_records: Sequence[YearlyRecord]) -> YearlyRecord:
        return derive_year(index, sorted_records)

    def derive(self, records: Iterable[YearlyRecord]) -> list[YearlyRecord]:
        """Sort by year and annotate every record (see calculate_financial_metrics)."""
        return calculate_financial_metrics(records)

    def ytd_performance(
            self,
            records: Iterable[YearlyRecord],
            current_portfolio_value: Decimal,
            current_year: int | None = None,
    ) -> YTDPerformance:
        return calculate_ytd_performance(records, current_portfolio_value, current_year)

    def overall_gains(
            self,
            records: Iterable[YearlyRecord],
            current_portfolio_value: Decimal,
    ) -> OverallGains:
        return calculate_overall_gains(records, current_portfolio_value)
