# backend/finengine/services/valuation/service.py
"""
Portfolio Valuator - multi-currency snapshot of the whole portfolio.

Operations:
- value_holding(): One holding in SGD, USD and INR
- aggregate(): Totals by category and by native currency in a display currency
- allocation_drift(): Category shares against allocation targets

Valuation rule per holding:
    quantity AND current_unit_price present → native = quantity × price
    otherwise                               → native = stored native value
    then native is converted to all three currencies with the supplied rates

Design Principles:
- Dependency Injection: converter injected via constructor
- Every holding contributes exactly once
- Known categories always appear, with zero when empty
- Ratios over a zero total are 0, never a division error

Usage:
    from finengine.services.valuation import PortfolioValuator

    valuator = PortfolioValuator()
    snapshot = valuator.aggregate(holdings, rates, Currency.SGD)
    drift = valuator.allocation_drift(snapshot, {"Core": 25, "Growth": 55, ...})
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import TYPE_CHECKING

from finengine.config import settings
from finengine.models import Currency, Holding, PORTFOLIO_CATEGORIES
from finengine.services.constants import DEFAULT_ALLOCATION_TARGETS, HUNDRED, ZERO
from finengine.services.currency_converter import (
    CurrencyConverter,
    CurrencyValues,
    ExchangeRateSet,
    parse_currency,
)
from finengine.services.valuation.types import (
    AllocationDrift,
    AllocationStatus,
    HoldingValuation,
    PortfolioSnapshot,
)
from finengine.utils.money import Number, percent_of, to_decimal

if TYPE_CHECKING:
    from finengine.services.protocols import CurrencyConverterProtocol

logger = logging.getLogger(__name__)


class PortfolioValuator:
    """
    Values holdings and aggregates them into a PortfolioSnapshot.

    Args:
        converter: Currency converter (default: CurrencyConverter)
        rebalance_threshold: Drift in percentage points beyond which a
            category needs rebalancing (default: settings.rebalance_threshold)
    """

    def __init__(
            self,
            converter: CurrencyConverterProtocol | None = None,
            rebalance_threshold: Decimal | None = None,
    ) -> None:
        self._converter = converter or CurrencyConverter()
        self.rebalance_threshold = (
            settings.rebalance_threshold
            if rebalance_threshold is None else rebalance_threshold
        )

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def value_holding(self, holding: Holding, rates: ExchangeRateSet) -> HoldingValuation:
        """
        Express one holding in all three currencies.

        Raises:
            MissingRateError: If the rate set cannot convert out of the
                holding's native currency
        """
        if holding.is_priced:
            native_value = holding.quantity * holding.current_unit_price
        else:
            native_value = holding.stored_native_value

        values = self._converter.convert_to_all(native_value, holding.currency, rates)

        return HoldingValuation(
            holding_id=holding.id,
            symbol=holding.symbol,
            category=holding.category,
            currency=holding.currency,
            native_value=native_value,
            values=values,
            is_calculated=holding.is_priced,
        )

    def aggregate(
            self,
            holdings: Iterable[Holding],
            rates: ExchangeRateSet,
            display_currency: Currency | str = Currency.SGD,
    ) -> PortfolioSnapshot:
        """
        Build a portfolio snapshot.

        Args:
            holdings: The user's holdings
            rates: Exchange-rate snapshot
            display_currency: Currency for total, by_category and by_currency

        Returns:
            PortfolioSnapshot with every holding counted once. The four
            standard categories and all three currencies are always present.

        Raises:
            InvalidCurrencyError: If display_currency is unsupported
            MissingRateError: If any holding cannot be converted
        """
        display = parse_currency(display_currency)

        by_category: dict[str, Decimal] = {name: ZERO for name in PORTFOLIO_CATEGORIES}
        by_currency: dict[Currency, Decimal] = {currency: ZERO for currency in Currency}
        totals = CurrencyValues.zero()
        valuations: list[HoldingValuation] = []

        for holding in holdings:
            valuation = self.value_holding(holding, rates)
            display_value = valuation.values.in_currency(display)

            by_category[holding.category] = (
                by_category.get(holding.category, ZERO) + display_value
            )
            by_currency[holding.currency] += display_value
            totals = totals + valuation.values
            valuations.append(valuation)

            logger.debug(
                f"{holding.symbol}: {valuation.native_value} {holding.currency.value} "
                f"→ {display_value} {display.value}"
            )

        total = totals.in_currency(display)

        logger.info(
            f"Aggregated {len(valuations)} holdings: total {total} {display.value}"
        )

        return PortfolioSnapshot(
            display_currency=display,
            total=total,
            by_category=by_category,
            by_currency=by_currency,
            totals=totals,
            holdings=valuations,
            rate_source=rates.source,
            rates_updated_at=rates.updated_at,
        )

    def allocation_drift(
            self,
            snapshot: PortfolioSnapshot,
            targets: Mapping[str, Number] | None = None,
            rebalance_threshold: Decimal | None = None,
    ) -> list[AllocationDrift]:
        """
        Compare each category's share with its target.

        Args:
            snapshot: Result of aggregate()
            targets: Category → target percent (default: Core 25 / Growth 55 /
                Hedge 10 / Liquidity 10)
            rebalance_threshold: Overrides the instance threshold

        Returns:
            One row per target category, in target order, followed by any
            snapshot category without a target (target 0).

        Formulas:
            current_pct = value / total × 100 (0 when total is 0)
            drift_pct = current_pct - target_pct
            needs_rebalance = |drift_pct| > threshold
        """
        target_map = {
            name: to_decimal(pct, field=f"target[{name}]")
            for name, pct in (targets if targets is not None else DEFAULT_ALLOCATION_TARGETS).items()
        }
        threshold = (
            self.rebalance_threshold if rebalance_threshold is None else rebalance_threshold
        )

        categories = list(target_map)
        for name, value in snapshot.by_category.items():
            if name not in target_map and value != ZERO:
                categories.append(name)

        rows: list[AllocationDrift] = []
        for name in categories:
            current_value = snapshot.by_category.get(name, ZERO)
            target_pct = target_map.get(name, ZERO)
            current_pct = percent_of(current_value, snapshot.total)
            drift_pct = current_pct - target_pct
            needs_rebalance = abs(drift_pct) > threshold

            if not needs_rebalance:
                status = AllocationStatus.ON_TRACK
            elif drift_pct < ZERO:
                status = AllocationStatus.UNDERWEIGHT
            else:
                status = AllocationStatus.OVERWEIGHT

            rows.append(
                AllocationDrift(
                    category=name,
                    current_value=current_value,
                    current_pct=current_pct,
                    target_pct=target_pct,
                    drift_pct=drift_pct,
                    drift_amount=drift_pct / HUNDRED * snapshot.total,
                    completion_pct=percent_of(current_pct, target_pct),
                    needs_rebalance=needs_rebalance,
                    status=status,
                )
            )

        rebalance = [row.category for row in rows if row.needs_rebalance]
        if rebalance:
            logger.info(f"Categories needing rebalance: {', '.join(rebalance)}")

        return rows
