# backend/tests/schemas/test_input_schemas.py
"""
Tests for holding, lot, record and allocation input schemas.

This module tests:
- Field normalization (symbol, currency, category)
- Numeric constraints
- Defaults (savings, allocation targets)
- Conversion to engine dataclasses
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from finengine.models import Currency, Provenance
from finengine.schemas import (
    AllocationTargetsInput,
    HoldingInput,
    LotInput,
    MonthlySnapshotInput,
    YearlyRecordInput,
)
from finengine.schemas.validators import validate_currency, validate_symbol


# =============================================================================
# VALIDATORS
# =============================================================================

class TestValidators:

    def test_currency_normalized(self):
        assert validate_currency(" inr ") == "INR"

    def test_unsupported_currency(self):
        with pytest.raises(ValueError, match="Valid options: SGD, USD, INR"):
            validate_currency("EUR")

    def test_symbol_normalized(self):
        assert validate_symbol(" cpf-oa ") == "CPF-OA"

    @pytest.mark.parametrize("symbol", ["", "   ", "$VWRA", "A" * 31])
    def test_invalid_symbol(self, symbol):
        with pytest.raises(ValueError):
            validate_symbol(symbol)


# =============================================================================
# HOLDINGS
# =============================================================================

class TestHoldingInput:
    """Tests for HoldingInput schema."""

    def test_valid_priced_holding(self):
        data = HoldingInput(
            id="h-1",
            symbol="iren",
            currency="usd",
            category=" Growth ",
            quantity="700",
            unit_cost="7.43",
            current_unit_price="16.10",
            value_usd="11270",
        )

        holding = data.to_holding()

        assert holding.symbol == "IREN"
        assert holding.currency == Currency.USD
        assert holding.category == "Growth"
        assert holding.quantity == Decimal("700")
        assert holding.is_priced

    def test_value_only_holding(self):
        holding = HoldingInput(
            id="h-2", symbol="CASH", currency="SGD", category="Liquidity", value_sgd="5000",
        ).to_holding()

        assert holding.quantity is None
        assert not holding.is_priced
        assert holding.stored_native_value == Decimal("5000")

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            HoldingInput(id="h-3", symbol="X", currency="USD", category="Core", quantity="-1")

    def test_blank_category_rejected(self):
        with pytest.raises(ValidationError):
            HoldingInput(id="h-4", symbol="X", currency="USD", category="   ")

    def test_unsupported_currency_rejected(self):
        with pytest.raises(ValidationError):
            HoldingInput(id="h-5", symbol="X", currency="GBP", category="Core")


class TestLotInput:

    def test_to_lot(self):
        lot = LotInput(quantity="200", unit_cost="15.00").to_lot()

        assert lot.quantity == Decimal("200")
        assert lot.unit_cost == Decimal("15.00")

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            LotInput(quantity="0", unit_cost="1")

    def test_zero_price_allowed(self):
        assert LotInput(quantity="1", unit_cost="0").unit_cost == Decimal("0")


# =============================================================================
# RECORDS
# =============================================================================

class TestYearlyRecordInput:

    def test_savings_default_to_income_minus_expenses(self):
        record = YearlyRecordInput(
            year=2023, income="100000", expenses="55000", net_worth="98000"
        ).to_record()

        assert record.savings == Decimal("45000")
        assert record.provenance == Provenance.USER_ENTERED
        assert record.market_gains is None

    def test_explicit_savings_kept(self):
        record = YearlyRecordInput(
            year=2023, income="100000", expenses="55000", savings="30000", net_worth="1"
        ).to_record()

        assert record.savings == Decimal("30000")

    def test_year_out_of_range(self):
        with pytest.raises(ValidationError):
            YearlyRecordInput(year=1800, income="1", expenses="1", net_worth="1")


class TestMonthlySnapshotInput:

    def test_to_snapshot(self):
        snapshot = MonthlySnapshotInput(
            year=2024, month=3, income="1000", expenses="400",
            portfolio_value="9000", net_worth="11000",
        ).to_snapshot()

        assert snapshot.savings == Decimal("600")

    @pytest.mark.parametrize("month", [0, 13])
    def test_month_out_of_range(self, month):
        with pytest.raises(ValidationError):
            MonthlySnapshotInput(
                year=2024, month=month, income="1", expenses="1",
                portfolio_value="1", net_worth="1",
            )


# =============================================================================
# ALLOCATION
# =============================================================================

class TestAllocationTargetsInput:

    def test_defaults(self):
        targets = AllocationTargetsInput().as_targets()

        assert targets.targets == {
            "Core": Decimal("25"),
            "Growth": Decimal("55"),
            "Hedge": Decimal("10"),
            "Liquidity": Decimal("10"),
        }
        assert targets.rebalance_threshold == Decimal("5")

    def test_must_sum_to_hundred(self):
        with pytest.raises(ValidationError, match="must sum to 100"):
            AllocationTargetsInput(core="30", growth="55", hedge="10", liquidity="10")

    def test_custom_split(self):
        targets = AllocationTargetsInput(
            core="40", growth="40", hedge="10", liquidity="10", rebalance_threshold="3"
        ).as_targets()

        assert targets.targets["Core"] == Decimal("40")
        assert targets.rebalance_threshold == Decimal("3")
