# backend/finengine/services/analytics/aggregation.py
"""
Monthly → yearly rollup.

MonthlyAggregator collapses monthly snapshots into one record per year and
merges those with the standalone yearly records the user typed in. A year
with at least one snapshot is always taken from the snapshots.

Per year (months sorted ascending):
    income    = Σ income
    expenses  = Σ expenses
    savings   = Σ (income - expenses)
    net_worth = net worth of the LAST month (a balance, never summed)

Across years (sorted ascending):
    market_gains   = max(0, net_worth - previous_net_worth)
    return_percent = market_gains / previous_net_worth × 100  (0 if previous <= 0)
    previous_net_worth is 0 for the first rolled-up year.

Clamp Limitation:
    The max(0, ...) clamp means a loss year looks exactly like a flat year.
    It is kept as the default so rollups match what users already see;
    pass clamp_market_gains=False (or set CLAMP_MONTHLY_MARKET_GAINS=false)
    to report negative gains.

Usage:
    aggregator = MonthlyAggregator()
    aggregates = aggregator.aggregate(snapshots)
    series = aggregator.merge(aggregates, yearly_records)
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from decimal import Decimal

from finengine.config import settings
from finengine.models import MonthlySnapshot, YearlyRecord
from finengine.services.analytics.returns import calculate_savings_rate, sort_records
from finengine.services.analytics.types import AnnualSummary, MonthlyAggregate
from finengine.services.constants import HUNDRED, ZERO
from finengine.services.exceptions import DuplicateRecordError, ValidationError

logger = logging.getLogger(__name__)


class MonthlyAggregator:
    """
    Rolls monthly snapshots into yearly aggregates.

    Args:
        clamp_market_gains: Clamp rolled-up market gains at zero
            (default: settings.clamp_monthly_market_gains)
    """

    def __init__(self, clamp_market_gains: bool | None = None) -> None:
        self.clamp_market_gains = (
            settings.clamp_monthly_market_gains
            if clamp_market_gains is None else clamp_market_gains
        )

    def group_by_year(
            self,
            snapshots: Iterable[MonthlySnapshot],
    ) -> dict[int, list[MonthlySnapshot]]:
        """
        Group snapshots by year, months sorted ascending, years ascending.

        Raises:
            ValidationError: If a month is outside 1-12
            DuplicateRecordError: If two snapshots share a year and month
        """
        grouped: dict[int, list[MonthlySnapshot]] = defaultdict(list)
        for snapshot in snapshots:
            if not 1 <= snapshot.month <= 12:
                raise ValidationError(
                    f"Month must be between 1 and 12, got {snapshot.month}",
                    field="month",
                )
            grouped[snapshot.year].append(snapshot)

        result: dict[int, list[MonthlySnapshot]] = {}
        for year in sorted(grouped):
            months = sorted(grouped[year], key=lambda s: s.month)
            for previous, current in zip(months, months[1:]):
                if previous.month == current.month:
                    raise DuplicateRecordError(
                        "monthly snapshot", f"{year}-{current.month:02d}"
                    )
            result[year] = months
        return result

    def aggregate(self, snapshots: Iterable[MonthlySnapshot]) -> list[MonthlyAggregate]:
        """
        Roll snapshots up into one aggregate per year.

        Returns:
            Aggregates sorted by year; empty list for no snapshots
        """
        grouped = self.group_by_year(snapshots)

        aggregates: list[MonthlyAggregate] = []
        previous_net_worth = ZERO

        for year, months in grouped.items():
            income = sum((m.income for m in months), ZERO)
            expenses = sum((m.expenses for m in months), ZERO)
            savings = sum((m.savings for m in months), ZERO)
            net_worth = months[-1].net_worth

            market_gains = net_worth - previous_net_worth
            if self.clamp_market_gains:
                market_gains = max(ZERO, market_gains)

            return_percent = (
                market_gains / previous_net_worth * HUNDRED
                if previous_net_worth > ZERO else ZERO
            )

            aggregates.append(
                MonthlyAggregate(
                    year=year,
                    income=income,
                    expenses=expenses,
                    savings=savings,
                    net_worth=net_worth,
                    market_gains=market_gains,
                    return_percent=return_percent,
                    savings_rate=calculate_savings_rate(income, savings),
                    month_count=len(months),
                )
            )
            previous_net_worth = net_worth

        if aggregates:
            logger.info(
                f"Rolled up {sum(a.month_count for a in aggregates)} monthly snapshots "
                f"into {len(aggregates)} years"
            )
        return aggregates

    def merge(
            self,
            monthly_aggregates: Sequence[MonthlyAggregate],
            yearly_records: Iterable[YearlyRecord],
    ) -> list[YearlyRecord]:
        """
        Union of rolled-up and standalone years, monthly data winning.

        Every year present in either input appears exactly once, sorted
        ascending.

        Raises:
            DuplicateRecordError: If yearly_records holds two records for a year
        """
        merged: dict[int, YearlyRecord] = {
            record.year: record for record in sort_records(yearly_records)
        }

        for aggregate in monthly_aggregates:
            if aggregate.year in merged:
                logger.debug(
                    f"Year {aggregate.year}: monthly rollup replaces standalone record"
                )
            merged[aggregate.year] = aggregate.to_yearly_record()

        return [merged[year] for year in sorted(merged)]

    def merge_snapshots(
            self,
            snapshots: Iterable[MonthlySnapshot],
            yearly_records: Iterable[YearlyRecord],
    ) -> list[YearlyRecord]:
        """aggregate() then merge() in one call."""
        return self.merge(self.aggregate(snapshots), yearly_records)

    def summarize_year(
            self,
            snapshots: Iterable[MonthlySnapshot],
            year: int,
    ) -> AnnualSummary | None:
        """
        Detailed summary of one year from its own snapshots.

        Formulas:
            market_gains = end_net_worth - start_net_worth - savings
            return_percent = market_gains / avg_portfolio_value × 100
                (0 if the average is not positive)

        Returns:
            AnnualSummary, or None when the year has no snapshots
        """
        months = self.group_by_year(s for s in snapshots if s.year == year).get(year)
        if not months:
            return None

        income = sum((m.income for m in months), ZERO)
        expenses = sum((m.expenses for m in months), ZERO)
        savings = income - expenses

        avg_portfolio_value = (
            sum((m.portfolio_value for m in months), ZERO) / Decimal(len(months))
        )
        start_net_worth = months[0].net_worth
        end_net_worth = months[-1].net_worth
        market_gains = end_net_worth - start_net_worth - savings
        return_percent = (
            market_gains / avg_portfolio_value * HUNDRED
            if avg_portfolio_value > ZERO else ZERO
        )

        return AnnualSummary(
            year=year,
            income=income,
            expenses=expenses,
            savings=savings,
            savings_rate=calculate_savings_rate(income, savings),
            avg_portfolio_value=avg_portfolio_value,
            start_portfolio_value=months[0].portfolio_value,
            end_portfolio_value=months[-1].portfolio_value,
            start_net_worth=start_net_worth,
            end_net_worth=end_net_worth,
            market_gains=market_gains,
            return_percent=return_percent,
            month_count=len(months),
        )
