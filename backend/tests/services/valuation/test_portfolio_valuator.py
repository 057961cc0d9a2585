# backend/tests/services/valuation/test_portfolio_valuator.py
"""
Unit tests for PortfolioValuator.

Test Coverage:
- value_holding: quantity × price vs stored value, conversion to all currencies
- aggregate: category / currency breakdowns, display currency, empty portfolio
- allocation_drift: percentages, status, rebalance threshold, zero total
"""

from decimal import Decimal

import pytest

from finengine.models import Currency, RateSource
from finengine.services.currency_converter import CurrencyValues
from finengine.services.exceptions import InvalidCurrencyError, MissingRateError
from finengine.services.valuation import (
    AllocationStatus,
    PortfolioSnapshot,
    PortfolioValuator,
)


# =============================================================================
# VALUE HOLDING
# =============================================================================

class TestValueHolding:
    """Tests for value_holding()."""

    def test_priced_holding_uses_quantity_times_price(self, valuator, make_holding, rates):
        """Stored value is ignored when units and price are present."""
        holding = make_holding(
            quantity=Decimal("700"),
            current_unit_price=Decimal("16.10"),
            value_usd=Decimal("9999"),
        )

        valuation = valuator.value_holding(holding, rates)

        assert valuation.native_value == Decimal("11270.00")
        assert valuation.is_calculated
        assert valuation.values.value_usd == Decimal("11270.00")
        assert valuation.values.value_sgd == Decimal("15214.5000")
        assert valuation.values.value_inr == Decimal("935410.00")

    def test_value_only_holding_uses_stored_native_value(self, valuator, make_holding, rates):
        holding = make_holding(
            symbol="CASH",
            currency=Currency.SGD,
            category="Liquidity",
            value_sgd=Decimal("1000"),
            value_usd=Decimal("1"),
        )

        valuation = valuator.value_holding(holding, rates)

        assert valuation.native_value == Decimal("1000")
        assert not valuation.is_calculated
        assert valuation.values.value_usd == Decimal("750")
        assert valuation.values.value_inr == Decimal("62000")

    def test_quantity_without_price_uses_stored_value(self, valuator, make_holding, rates):
        holding = make_holding(quantity=Decimal("10"), value_usd=Decimal("123"))

        assert valuator.value_holding(holding, rates).native_value == Decimal("123")

    def test_missing_rate_propagates(self, valuator, make_holding, usd_only_rates):
        holding = make_holding(currency=Currency.INR, value_inr=Decimal("1000"))

        with pytest.raises(MissingRateError):
            valuator.value_holding(holding, usd_only_rates)


# =============================================================================
# AGGREGATE
# =============================================================================

class TestAggregate:
    """Tests for aggregate()."""

    @pytest.fixture
    def holdings(self, make_holding):
        return [
            make_holding(
                symbol="VWRA", category="Core",
                quantity=Decimal("10"), current_unit_price=Decimal("100"),
            ),
            make_holding(
                symbol="IREN", category="Growth",
                quantity=Decimal("20"), current_unit_price=Decimal("15"),
            ),
            make_holding(
                symbol="CASH", currency=Currency.SGD, category="Liquidity",
                value_sgd=Decimal("500"),
            ),
        ]

    def test_totals_in_display_currency(self, valuator, holdings, rates):
        """USD 1000 + USD 300 + SGD 500 → SGD 1350 + 405 + 500."""
        snapshot = valuator.aggregate(holdings, rates, Currency.SGD)

        assert snapshot.display_currency == Currency.SGD
        assert snapshot.total == Decimal("2255")
        assert snapshot.holding_count == 3

    def test_by_category_includes_empty_categories(self, valuator, holdings, rates):
        snapshot = valuator.aggregate(holdings, rates, "SGD")

        assert snapshot.by_category == {
            "Core": Decimal("1350"),
            "Growth": Decimal("405"),
            "Hedge": Decimal("0"),
            "Liquidity": Decimal("500"),
        }

    def test_by_currency_groups_by_native_currency(self, valuator, holdings, rates):
        snapshot = valuator.aggregate(holdings, rates, Currency.SGD)

        assert snapshot.by_currency == {
            Currency.SGD: Decimal("500"),
            Currency.USD: Decimal("1755"),
            Currency.INR: Decimal("0"),
        }

    def test_breakdowns_sum_to_total(self, valuator, holdings, rates):
        snapshot = valuator.aggregate(holdings, rates, Currency.USD)

        assert sum(snapshot.by_category.values()) == snapshot.total
        assert sum(snapshot.by_currency.values()) == snapshot.total

    def test_display_currency_usd(self, valuator, holdings, rates):
        """USD 1300 + SGD 500 × 0.75."""
        snapshot = valuator.aggregate(holdings, rates, Currency.USD)

        assert snapshot.total == Decimal("1675")
        assert snapshot.totals.value_usd == Decimal("1675")
        assert snapshot.totals.value_sgd == Decimal("2255")

    def test_unknown_category_is_added(self, valuator, make_holding, rates):
        holding = make_holding(category="Crypto", value_usd=Decimal("50"))

        snapshot = valuator.aggregate([holding], rates, Currency.USD)

        assert snapshot.by_category["Crypto"] == Decimal("50")
        assert snapshot.by_category["Core"] == Decimal("0")

    def test_empty_portfolio(self, valuator, rates):
        snapshot = valuator.aggregate([], rates)

        assert snapshot.total == Decimal("0")
        assert set(snapshot.by_category) == {"Core", "Growth", "Hedge", "Liquidity"}
        assert snapshot.holdings == []

    def test_records_rate_provenance(self, valuator, holdings, rates):
        snapshot = valuator.aggregate(holdings, rates)

        assert snapshot.rate_source == RateSource.LIVE
        assert snapshot.rates_updated_at == rates.updated_at

    def test_invalid_display_currency(self, valuator, holdings, rates):
        with pytest.raises(InvalidCurrencyError):
            valuator.aggregate(holdings, rates, "EUR")

    def test_accepts_generator(self, valuator, holdings, rates):
        snapshot = valuator.aggregate((h for h in holdings), rates)

        assert snapshot.holding_count == 3


# =============================================================================
# ALLOCATION DRIFT
# =============================================================================

def _snapshot(by_category: dict[str, Decimal]) -> PortfolioSnapshot:
    total = sum(by_category.values(), Decimal("0"))
    return PortfolioSnapshot(
        display_currency=Currency.SGD,
        total=total,
        by_category=by_category,
        by_currency={Currency.SGD: total, Currency.USD: Decimal("0"), Currency.INR: Decimal("0")},
        totals=CurrencyValues(total, Decimal("0"), Decimal("0")),
        holdings=[],
        rate_source=RateSource.MANUAL,
    )


class TestAllocationDrift:
    """Tests for allocation_drift()."""

    @pytest.fixture
    def snapshot(self):
        """Core 20% / Growth 65% / Hedge 10% / Liquidity 5%."""
        return _snapshot({
            "Core": Decimal("2000"),
            "Growth": Decimal("6500"),
            "Hedge": Decimal("1000"),
            "Liquidity": Decimal("500"),
        })

    def test_default_targets(self, valuator, snapshot):
        rows = {row.category: row for row in valuator.allocation_drift(snapshot)}

        assert rows["Core"].current_pct == Decimal("20")
        assert rows["Core"].target_pct == Decimal("25")
        assert rows["Core"].drift_pct == Decimal("-5")
        assert rows["Growth"].drift_pct == Decimal("10")

    def test_threshold_is_exclusive(self, valuator, snapshot):
        """Exactly 5 points of drift does not trigger a rebalance."""
        rows = {row.category: row for row in valuator.allocation_drift(snapshot)}

        assert not rows["Core"].needs_rebalance
        assert rows["Core"].status == AllocationStatus.ON_TRACK
        assert not rows["Liquidity"].needs_rebalance

    def test_overweight_and_underweight(self, valuator, snapshot):
        targets = {"Core": 40, "Growth": 40, "Hedge": 10, "Liquidity": 10}

        rows = {row.category: row for row in valuator.allocation_drift(snapshot, targets)}

        assert rows["Core"].status == AllocationStatus.UNDERWEIGHT
        assert rows["Growth"].status == AllocationStatus.OVERWEIGHT
        assert rows["Hedge"].status == AllocationStatus.ON_TRACK

    def test_drift_amount_and_completion(self, valuator, snapshot):
        rows = {row.category: row for row in valuator.allocation_drift(snapshot)}

        assert rows["Growth"].drift_amount == Decimal("1000")
        assert rows["Core"].drift_amount == Decimal("-500")
        assert rows["Core"].completion_pct == Decimal("80")

    def test_rows_follow_target_order(self, valuator, snapshot):
        targets = {"Liquidity": 10, "Core": 90}

        rows = valuator.allocation_drift(snapshot, targets)

        assert [row.category for row in rows] == ["Liquidity", "Core", "Growth", "Hedge"]
        assert rows[2].target_pct == Decimal("0")

    def test_zero_total_gives_zero_percentages(self, valuator):
        snapshot = _snapshot({"Core": Decimal("0"), "Growth": Decimal("0")})

        rows = valuator.allocation_drift(snapshot)

        assert all(row.current_pct == Decimal("0") for row in rows)
        assert all(row.drift_amount == Decimal("0") for row in rows)

    def test_custom_threshold(self, valuator, snapshot):
        rows = {
            row.category: row
            for row in valuator.allocation_drift(snapshot, rebalance_threshold=Decimal("4"))
        }

        assert rows["Core"].needs_rebalance
        assert rows["Liquidity"].needs_rebalance

    def test_instance_threshold_from_constructor(self, converter, snapshot):
        strict = PortfolioValuator(converter=converter, rebalance_threshold=Decimal("1"))

        flagged = [row.category for row in strict.allocation_drift(snapshot) if row.needs_rebalance]

        assert flagged == ["Core", "Growth", "Liquidity"]

    def test_zero_target_completion_is_zero(self, valuator, snapshot):
        rows = valuator.allocation_drift(snapshot, {"Core": 100})

        growth = next(row for row in rows if row.category == "Growth")
        assert growth.completion_pct == Decimal("0")
        assert growth.status == AllocationStatus.OVERWEIGHT
