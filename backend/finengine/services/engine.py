# backend/finengine/services/engine.py
"""
Financial Engine - one full evaluation of a user's data set.

Control flow:
    raw inputs
      → CostBasisTracker.reconcile_all     (stored vs calculated values)
      → PortfolioValuator.aggregate        (multi-currency totals)
      → PortfolioValuator.allocation_drift (category shares vs targets)
      → PerformanceService.get_performance (yearly series, YTD, all-time)
      → EngineReport

The engine holds no state between calls. The caller loads the user's data,
passes it in as a UserDataSet and persists whatever it wants from the
report. Each evaluation runs inside a correlation scope so every log line
it writes can be traced back to the run.

Usage:
    from finengine.services import FinancialEngine, UserDataSet

    engine = FinancialEngine()
    report = engine.evaluate(
        UserDataSet(user_id="u-1", holdings=holdings, rates=rates),
        display_currency="SGD",
    )
"""

import logging
from dataclasses import dataclass, field

from finengine.models import (
    AllocationTargets,
    Currency,
    Holding,
    MonthlySnapshot,
    YearlyRecord,
)
from finengine.services.analytics import PerformanceReport, PerformanceService
from finengine.services.constants import DEFAULT_ALLOCATION_TARGETS
from finengine.services.currency_converter import (
    CurrencyConverter,
    ExchangeRateSet,
    parse_currency,
)
from finengine.services.valuation import (
    AllocationDrift,
    CostBasisTracker,
    PortfolioSnapshot,
    PortfolioValuator,
    ReconciliationReport,
)
from finengine.utils.context import correlation_scope

logger = logging.getLogger(__name__)


# =============================================================================
# DATA TYPES
# =============================================================================

@dataclass(frozen=True)
class UserDataSet:
    """
    Everything the engine needs about one user.

    Attributes:
        user_id: Owner of the data, used for logging only
        holdings: Current holdings
        rates: Exchange-rate snapshot
        yearly_records: Standalone yearly records
        monthly_snapshots: Monthly snapshots
        allocation_targets: Target split (default: Core 25 / Growth 55 /
            Hedge 10 / Liquidity 10, threshold from settings)
    """

    user_id: str
    holdings: list[Holding]
    rates: ExchangeRateSet
    yearly_records: list[YearlyRecord] = field(default_factory=list)
    monthly_snapshots: list[MonthlySnapshot] = field(default_factory=list)
    allocation_targets: AllocationTargets | None = None


@dataclass(frozen=True)
class EngineReport:
    """
    Result of FinancialEngine.evaluate().

    Attributes:
        user_id: Owner of the evaluated data
        correlation_id: ID tagged on every log line of the run
        portfolio: Multi-currency portfolio snapshot
        allocation: Drift rows per category
        reconciliation: One report per holding
        performance: Yearly series, YTD and all-time gains
    """

    user_id: str
    correlation_id: str
    portfolio: PortfolioSnapshot
    allocation: list[AllocationDrift]
    reconciliation: list[ReconciliationReport]
    performance: PerformanceReport

    @property
    def inconsistent_holdings(self) -> list[ReconciliationReport]:
        return [report for report in self.reconciliation if not report.consistent]

    @property
    def rebalance_needed(self) -> list[AllocationDrift]:
        return [row for row in self.allocation if row.needs_rebalance]


# =============================================================================
# ENGINE
# =============================================================================

class FinancialEngine:
    """
    Runs the valuation and performance pipeline for one user at a time.

    Args:
        cost_basis: Cost basis tracker (reconciliation)
        valuator: Portfolio valuator
        performance: Performance service

    All collaborators default to instances sharing one CurrencyConverter.
    """

    def __init__(
            self,
            cost_basis: CostBasisTracker | None = None,
            valuator: PortfolioValuator | None = None,
            performance: PerformanceService | None = None,
    ) -> None:
        converter = CurrencyConverter()
        self.cost_basis = cost_basis or CostBasisTracker(converter=converter)
        self.valuator = valuator or PortfolioValuator(converter=converter)
        self.performance = performance or PerformanceService()

    def evaluate(
            self,
            dataset: UserDataSet,
            display_currency: Currency | str = Currency.SGD,
            current_year: int | None = None,
            correlation_id: str | None = None,
    ) -> EngineReport:
        """
        Evaluate one user's data set.

        Args:
            dataset: The user's holdings, rates, records and targets
            display_currency: Currency for totals, drift and live-value gains
            current_year: Year treated as "this year" for YTD figures
            correlation_id: Reuse a caller's ID (default: current or new)

        Returns:
            EngineReport

        Raises:
            InvalidCurrencyError: If display_currency is unsupported
            MissingRateError: If the rate set cannot value a holding
            DuplicateRecordError: If records or snapshots repeat a period
        """
        display = parse_currency(display_currency)

        with correlation_scope(correlation_id) as run_id:
            logger.info(
                f"Evaluating data set for user {dataset.user_id}: "
                f"{len(dataset.holdings)} holdings, "
                f"{len(dataset.yearly_records)} yearly records, "
                f"{len(dataset.monthly_snapshots)} monthly snapshots"
            )

            reconciliation = self.cost_basis.reconcile_all(dataset.holdings)

            portfolio = self.valuator.aggregate(dataset.holdings, dataset.rates, display)

            targets = dataset.allocation_targets
            allocation = self.valuator.allocation_drift(
                portfolio,
                targets.targets if targets else DEFAULT_ALLOCATION_TARGETS,
                targets.rebalance_threshold if targets else None,
            )

            performance = self.performance.get_performance(
                dataset.monthly_snapshots,
                dataset.yearly_records,
                current_portfolio_value=portfolio.total,
                current_year=current_year,
            )

            logger.info(
                f"Evaluation complete for user {dataset.user_id}: "
                f"total {portfolio.total} {display.value}, "
                f"{len(performance.series)} years in series"
            )

            return EngineReport(
                user_id=dataset.user_id,
                correlation_id=run_id,
                portfolio=portfolio,
                allocation=allocation,
                reconciliation=reconciliation,
                performance=performance,
            )
