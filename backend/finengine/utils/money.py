# backend/finengine/utils/money.py
"""
Decimal helpers shared by the calculators.

The dashboard hands the engine a mix of ints, floats and strings. Floats are
converted through ``str`` so that 4.40 becomes Decimal("4.40") rather than
Decimal("4.4000000000000003552713678800500929355621337890625").
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Presentation precision: money and percentages to cents / hundredths
MONEY_QUANTUM = Decimal("0.01")
PERCENT_QUANTUM = Decimal("0.01")

Number = Decimal | int | float | str


def to_decimal(value: Number, field: str | None = None) -> Decimal:
    """
    Coerce a numeric input to Decimal.

    Args:
        value: int, float, str or Decimal
        field: Field name for the error message

    Returns:
        Decimal representation of value

    Raises:
        ValueError: If value is not a finite number
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"{field or 'value'} must be a number, got bool")
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(value)
        except (InvalidOperation, TypeError) as exc:
            raise ValueError(f"{field or 'value'} must be a number, got {value!r}") from exc

    if not result.is_finite():
        raise ValueError(f"{field or 'value'} must be finite, got {value!r}")
    return result


def to_decimal_or_none(value: Number | None, field: str | None = None) -> Decimal | None:
    """Like to_decimal, but passes None through."""
    if value is None:
        return None
    return to_decimal(value, field)


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents (ROUND_HALF_UP)."""
    return amount.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def quantize_percent(percent: Decimal) -> Decimal:
    """Round a percentage to two decimal places (ROUND_HALF_UP)."""
    return percent.quantize(PERCENT_QUANTUM, rounding=ROUND_HALF_UP)


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """
    part / whole × 100, or 0 when whole is not positive.

    Every ratio in the engine uses the "0 instead of a division error" rule,
    so a new user with empty balances gets zeros rather than exceptions.
    """
    if whole <= ZERO:
        return ZERO
    return part / whole * HUNDRED
