# tests/utils/test_money.py
"""
Tests for Decimal helper functions.
"""

from decimal import Decimal

import pytest

from finengine.utils.money import (
    percent_of,
    quantize_money,
    quantize_percent,
    to_decimal,
    to_decimal_or_none,
)


class TestToDecimal:
    """Tests for to_decimal function."""

    def test_float_goes_through_str(self):
        """Should not carry binary float noise."""
        assert to_decimal(4.40) == Decimal("4.4")
        assert str(to_decimal(0.1)) == "0.1"

    def test_string_and_int(self):
        assert to_decimal("15.00") == Decimal("15.00")
        assert to_decimal(700) == Decimal("700")

    def test_decimal_passthrough(self):
        value = Decimal("1.23")
        assert to_decimal(value) is value

    @pytest.mark.parametrize("value", ["abc", None, object()])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValueError, match="must be a number"):
            to_decimal(value, field="price")

    def test_rejects_bool(self):
        """True is an int in Python but never a valid amount."""
        with pytest.raises(ValueError):
            to_decimal(True)

    @pytest.mark.parametrize("value", ["NaN", "Infinity", float("inf")])
    def test_rejects_non_finite(self, value):
        with pytest.raises(ValueError, match="must be finite"):
            to_decimal(value)

    def test_or_none_passes_none(self):
        assert to_decimal_or_none(None) is None
        assert to_decimal_or_none("2") == Decimal("2")


class TestQuantize:

    def test_money_rounds_half_up(self):
        assert quantize_money(Decimal("7.425")) == Decimal("7.43")
        assert quantize_money(Decimal("-0.005")) == Decimal("-0.01")

    def test_percent_two_places(self):
        assert str(quantize_percent(Decimal("17.96008869"))) == "17.96"


class TestPercentOf:

    def test_basic_ratio(self):
        assert percent_of(Decimal("25"), Decimal("200")) == Decimal("12.5")

    @pytest.mark.parametrize("whole", [Decimal("0"), Decimal("-10")])
    def test_non_positive_whole_is_zero(self, whole):
        assert percent_of(Decimal("5"), whole) == Decimal("0")
