# backend/finengine/services/analytics/__init__.py
"""
Analytics Package.

Year-over-year performance for one user:
- Savings rate, market gains and return percent per year
- Monthly snapshot rollup into yearly records
- YTD and all-time gains for the live portfolio value

Usage:
    from finengine.services.analytics import PerformanceService

    service = PerformanceService()
    series = service.build_yearly_series(snapshots, yearly_records)

Architecture:
    analytics/
    ├── __init__.py       # This file - package exports
    ├── types.py          # Data classes
    ├── returns.py        # Metric functions + MetricsCalculator
    ├── aggregation.py    # MonthlyAggregator
    └── service.py        # PerformanceService (orchestrator)
"""

from finengine.services.analytics.aggregation import MonthlyAggregator
from finengine.services.analytics.returns import (
    MetricsCalculator,
    calculate_financial_metrics,
    calculate_overall_gains,
    calculate_savings_rate,
    calculate_ytd_performance,
    derive_year,
)
from finengine.services.analytics.service import PerformanceService
from finengine.services.analytics.types import (
    AnnualSummary,
    MonthlyAggregate,
    OverallGains,
    PerformanceReport,
    YTDPerformance,
)

__all__ = [
    # Services
    "PerformanceService",
    "MonthlyAggregator",
    "MetricsCalculator",
    # Functions
    "calculate_savings_rate",
    "derive_year",
    "calculate_financial_metrics",
    "calculate_ytd_performance",
    "calculate_overall_gains",
    # Types
    "MonthlyAggregate",
    "AnnualSummary",
    "YTDPerformance",
    "OverallGains",
    "PerformanceReport",
]
