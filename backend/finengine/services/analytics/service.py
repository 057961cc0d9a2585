# backend/finengine/services/analytics/service.py
"""
Performance Service orchestrator.

This is the main entry point for the yearly performance series. It:
1. Rolls monthly snapshots up into yearly aggregates (MonthlyAggregator)
2. Merges them with standalone yearly records, monthly data winning
3. Derives savings rate / market gains / return percent for the
   standalone rows (MetricsCalculator)
4. Computes YTD and all-time gains for the live portfolio value

Rows built from monthly snapshots keep the metrics of the rollup itself.
Standalone rows are derived over the merged series, so a standalone year
following a rolled-up year uses the rolled-up year-end net worth as its
previous balance.

Architecture:
    PerformanceService
        ├── uses → MonthlyAggregator (rollup + merge)
        └── uses → MetricsCalculator (derivation, YTD, overall)

Usage:
    from finengine.services.analytics import PerformanceService

    service = PerformanceService()
    series = service.build_yearly_series(snapshots, yearly_records)
    report = service.get_performance(
        snapshots, yearly_records,
        current_portfolio_value=Decimal("250000"),
        current_year=2025,
    )
"""

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from finengine.models import MonthlySnapshot, Provenance, YearlyRecord
from finengine.services.analytics.aggregation import MonthlyAggregator
from finengine.services.analytics.returns import MetricsCalculator
from finengine.services.analytics.types import PerformanceReport

logger = logging.getLogger(__name__)


class PerformanceService:
    """
    Builds the year-over-year performance series.

    Args:
        aggregator: Monthly rollup (default: MonthlyAggregator())
        metrics: Metric derivation (default: MetricsCalculator())
    """

    def __init__(
            self,
            aggregator: MonthlyAggregator | None = None,
            metrics: MetricsCalculator | None = None,
    ) -> None:
        self._aggregator = aggregator or MonthlyAggregator()
        self._metrics = metrics or MetricsCalculator()

    def build_yearly_series(
            self,
            snapshots: Iterable[MonthlySnapshot],
            yearly_records: Iterable[YearlyRecord],
    ) -> list[YearlyRecord]:
        """
        Merged yearly series with metrics, sorted ascending by year.

        Returns:
            One record per year present in either input; empty list for
            a user with no data
        """
        merged = self._aggregator.merge_snapshots(snapshots, yearly_records)
        if not merged:
            return []

        derived = self._metrics.derive(merged)

        series = [
            original if original.provenance == Provenance.MONTHLY_ROLLUP else annotated
            for original, annotated in zip(merged, derived)
        ]

        rolled_up = sum(1 for r in series if r.provenance == Provenance.MONTHLY_ROLLUP)
        logger.info(
            f"Built yearly series: {len(series)} years "
            f"({rolled_up} from monthly snapshots)"
        )
        return series

    def get_performance(
            self,
            snapshots: Iterable[MonthlySnapshot],
            yearly_records: Iterable[YearlyRecord],
            current_portfolio_value: Decimal,
            current_year: int | None = None,
    ) -> PerformanceReport:
        """
        Series plus YTD / all-time gains for the live portfolio value.

        Args:
            snapshots: Monthly snapshots
            yearly_records: Standalone yearly records
            current_portfolio_value: Live portfolio value (display currency)
            current_year: Year treated as "this year" (default: today's year)
        """
        snapshots = list(snapshots)
        year = current_year if current_year is not None else date.today().year

        series = self.build_yearly_series(snapshots, yearly_records)

        return PerformanceReport(
            series=series,
            ytd=self._metrics.ytd_performance(series, current_portfolio_value, year),
            overall=self._metrics.overall_gains(series, current_portfolio_value),
            current_year_summary=self._aggregator.summarize_year(snapshots, year),
        )
