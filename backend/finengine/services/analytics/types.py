# backend/finengine/services/analytics/types.py
"""
Data types for the analytics layer.

This module defines the data structures produced by the metrics and
aggregation calculators. All types use Decimal for financial precision.

Architecture:
    - MonthlyAggregate: One year rolled up from monthly snapshots
    - AnnualSummary: Detailed single-year summary from monthly snapshots
    - YTDPerformance: Current value vs last year's closing net worth
    - OverallGains: Current value vs everything ever saved
    - PerformanceReport: Combined result from PerformanceService
"""

from dataclasses import dataclass
from decimal import Decimal

from finengine.models import Confidence, Provenance, YearlyRecord


@dataclass(frozen=True)
class MonthlyAggregate:
    """
    One calendar year rolled up from its monthly snapshots.

    Attributes:
        year: Calendar year
        income / expenses: Sums over the year's months
        savings: Sum of (income - expenses) over the year's months
        net_worth: Net worth of the LAST month (a balance, never summed)
        market_gains: Net worth change vs the previous rolled-up year,
            clamped at 0 unless clamping is disabled
        return_percent: market_gains / previous year-end net worth × 100
            (0 when there is no positive previous value)
        savings_rate: savings / income × 100 (0 when income is 0)
        month_count: Number of snapshots in the year
    """

    year: int
    income: Decimal
    expenses: Decimal
    savings: Decimal
    net_worth: Decimal
    market_gains: Decimal
    return_percent: Decimal
    savings_rate: Decimal
    month_count: int

    @property
    def notes(self) -> str:
        return f"Aggregated from {self.month_count} monthly snapshots"

    def to_yearly_record(self) -> YearlyRecord:
        """Yearly record tagged as a high-confidence monthly rollup."""
        return YearlyRecord(
            year=self.year,
            income=self.income,
            expenses=self.expenses,
            savings=self.savings,
            net_worth=self.net_worth,
            market_gains=self.market_gains,
            return_percent=self.return_percent,
            savings_rate=self.savings_rate,
            srs_contribution=Decimal("0"),
            provenance=Provenance.MONTHLY_ROLLUP,
            confidence=Confidence.HIGH,
            notes=self.notes,
        )


@dataclass(frozen=True)
class AnnualSummary:
    """
    Single-year summary built from that year's monthly snapshots only.

    Unlike MonthlyAggregate this needs no previous year: gains are measured
    from the first to the last snapshot of the year.

    Formulas:
        market_gains = end_net_worth - start_net_worth - savings
        return_percent = market_gains / avg_portfolio_value × 100
    """

    year: int
    income: Decimal
    expenses: Decimal
    savings: Decimal
    savings_rate: Decimal
    avg_portfolio_value: Decimal
    start_portfolio_value: Decimal
    end_portfolio_value: Decimal
    start_net_worth: Decimal
    end_net_worth: Decimal
    market_gains: Decimal
    return_percent: Decimal
    month_count: int


@dataclass(frozen=True)
class YTDPerformance:
    """
    Year-to-date performance of the live portfolio.

    Attributes:
        total_gain: current value - last year's net worth - this year's savings
        percentage_change: total_gain / starting_value × 100
        timeframe: "YTD", or "YTD (no baseline)" without last year's record
        starting_value: Last year's closing net worth (0 without a baseline)
    """

    total_gain: Decimal
    percentage_change: Decimal
    timeframe: str
    starting_value: Decimal

    @property
    def has_baseline(self) -> bool:
        return self.timeframe == "YTD"


@dataclass(frozen=True)
class OverallGains:
    """
    All-time performance, treating total savings as the amount invested.

    Attributes:
        total_gain: current value - total savings
        percentage_change: total_gain / total_savings × 100
        total_savings: Sum of savings across every record
    """

    total_gain: Decimal
    percentage_change: Decimal
    total_savings: Decimal


@dataclass(frozen=True)
class PerformanceReport:
    """
    Combined result from PerformanceService.get_performance().

    Attributes:
        series: Merged yearly series with derived metrics, sorted by year
        ytd: Year-to-date performance of the live portfolio
        overall: All-time gains of the live portfolio
        current_year_summary: Monthly summary of the current year (None
            without snapshots for it)
    """

    series: list[YearlyRecord]
    ytd: YTDPerformance
    overall: OverallGains
    current_year_summary: AnnualSummary | None = None
