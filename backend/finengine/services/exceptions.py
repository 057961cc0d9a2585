# backend/finengine/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO transport
knowledge. Callers (API handlers, jobs, scripts) decide how to surface them.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidLotError
    │   ├── InvalidPriceError
    │   └── DuplicateRecordError
    └── FXRateError
        ├── InvalidCurrencyError
        └── MissingRateError

Not exceptions:
    - Reconciliation mismatches are reported as data
      (ReconciliationStatus.INCONSISTENT), since they are expected while a
      price refresh is pending.
    - Empty inputs to metrics/aggregation return empty results; a new user
      with no history is a valid state.
"""

from decimal import Decimal


class ServiceError(Exception):
    """
    Base exception for all engine errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when engine input fails validation.

    This is for programmatic validation of values handed to the engine, NOT
    for user input validation which is handled by Pydantic schemas.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidLotError(ValidationError):
    """
    Raised when a lot cannot be applied to a cost basis.

    Examples:
    - Non-positive lot quantity
    - Negative lot price or negative existing unit cost
    - Negative existing quantity

    Attributes:
        quantity: The offending lot quantity
        unit_cost: The offending lot price
    """

    def __init__(
            self,
            reason: str,
            quantity: Decimal | None = None,
            unit_cost: Decimal | None = None,
            field: str | None = None,
    ) -> None:
        self.reason = reason
        self.quantity = quantity
        self.unit_cost = unit_cost
        super().__init__(f"Invalid lot: {reason}", field=field)


class InvalidPriceError(ValidationError):
    """Raised when a current price override is negative."""

    def __init__(self, symbol: str, price: Decimal) -> None:
        self.symbol = symbol
        self.price = price
        super().__init__(
            f"Invalid current price {price} for {symbol}: price cannot be negative",
            field="current_unit_price",
        )


class DuplicateRecordError(ValidationError):
    """
    Raised when a series holds two entries for the same period.

    Yearly records are unique per year and monthly snapshots unique per
    (year, month). Deriving metrics over duplicates would silently pick one.

    Attributes:
        period: The duplicated period, e.g. "2023" or "2023-04"
    """

    def __init__(self, kind: str, period: str) -> None:
        self.kind = kind
        self.period = period
        super().__init__(f"Duplicate {kind} for {period}", field="year")


# =============================================================================
# FX RATE ERRORS
# =============================================================================


class FXRateError(ServiceError):
    """
    Base exception for currency conversion errors.

    Attributes:
        from_currency: The source currency code
        to_currency: The target currency code
    """

    def __init__(
            self,
            message: str,
            from_currency: str | None = None,
            to_currency: str | None = None,
    ) -> None:
        self.from_currency = from_currency
        self.to_currency = to_currency
        super().__init__(message)


class InvalidCurrencyError(FXRateError):
    """
    Raised when a currency code is outside the supported set.

    Supported: SGD, USD, INR.

    Attributes:
        currency: The rejected code as received
    """

    def __init__(self, currency: object) -> None:
        self.currency = currency
        super().__init__(
            f"Unsupported currency: '{currency}'. Valid options: SGD, USD, INR"
        )


class MissingRateError(FXRateError):
    """
    Raised when the rate set has no directed rate for a conversion.

    The engine never substitutes a fallback rate (a missing rate is never
    treated as 1.0).

    Attributes:
        rate_key: The directed key that was looked up, e.g. "SGD_TO_INR"
    """

    def __init__(self, from_currency: str, to_currency: str) -> None:
        self.rate_key = f"{from_currency}_TO_{to_currency}"
        super().__init__(
            f"No exchange rate {self.rate_key} in the supplied rate set",
            from_currency=from_currency,
            to_currency=to_currency,
        )


__all__ = [
    # Base
    "ServiceError",
    # Validation
    "ValidationError",
    "InvalidLotError",
    "InvalidPriceError",
    "DuplicateRecordError",
    # FX Rate
    "FXRateError",
    "InvalidCurrencyError",
    "MissingRateError",
]
