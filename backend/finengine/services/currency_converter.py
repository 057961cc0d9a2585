# backend/finengine/services/currency_converter.py
"""
Currency Converter - rate-table lookups between SGD, USD and INR.

The dashboard keeps an exchange-rate snapshot of six directed rates, one for
every ordered pair of supported currencies:

    SGD_TO_USD  SGD_TO_INR
    USD_TO_SGD  USD_TO_INR
    INR_TO_SGD  INR_TO_USD

Rate convention: "1 FROM = rate × TO", so converting always MULTIPLIES.
    Example: SGD_TO_USD = 0.74 means 1 SGD = 0.74 USD, so 100 SGD = 74 USD

Rules:
- Same currency → identity, no lookup (works even with an empty rate set)
- Each direction is looked up as given. The reverse rate is never inverted
  and no pair is triangulated through a third currency, because the snapshot
  is supplied as a whole (manual or live) and the engine does not enforce
  triangular consistency.
- A missing rate raises MissingRateError. Nothing ever falls back to 1.0
  or to a hard-coded default table.

Usage:
    converter = CurrencyConverter()
    rates = ExchangeRateSet.from_mapping({"SGD_TO_USD": "0.74", ...})

    usd = converter.convert(Decimal("100"), "SGD", "USD", rates)
    values = converter.convert_to_all(Decimal("100"), Currency.SGD, rates)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from itertools import permutations

from finengine.models import Currency, RateSource
from finengine.services.constants import RATE_KEY_TEMPLATE, ZERO
from finengine.services.exceptions import (
    InvalidCurrencyError,
    MissingRateError,
    ValidationError,
)
from finengine.utils.money import Number, to_decimal

logger = logging.getLogger(__name__)


# Every directed key a complete snapshot must carry
REQUIRED_RATE_KEYS: tuple[str, ...] = tuple(
    RATE_KEY_TEMPLATE.format(from_currency=a.value, to_currency=b.value)
    for a, b in permutations(Currency, 2)
)


# =============================================================================
# CURRENCY HELPERS
# =============================================================================

def parse_currency(code: Currency | str) -> Currency:
    """
    Normalize a currency code to the Currency enum.

    Args:
        code: Currency enum or code string (case-insensitive, trimmed)

    Returns:
        The matching Currency

    Raises:
        InvalidCurrencyError: If the code is not SGD, USD or INR
    """
    if isinstance(code, Currency):
        return code
    if isinstance(code, str):
        try:
            return Currency(code.strip().upper())
        except ValueError:
            pass
    raise InvalidCurrencyError(code)


def rate_key(from_currency: Currency, to_currency: Currency) -> str:
    """Directed rate key, e.g. rate_key(SGD, USD) == "SGD_TO_USD"."""
    return RATE_KEY_TEMPLATE.format(
        from_currency=from_currency.value,
        to_currency=to_currency.value,
    )


def _parse_rate_key(key: str) -> tuple[Currency, Currency]:
    parts = key.strip().upper().split("_TO_")
    if len(parts) != 2:
        raise ValidationError(
            f"Malformed rate key '{key}', expected e.g. 'SGD_TO_USD'",
            field="rates",
        )
    return parse_currency(parts[0]), parse_currency(parts[1])


# =============================================================================
# DATA TYPES
# =============================================================================

@dataclass(frozen=True)
class ExchangeRateSet:
    """
    One exchange-rate snapshot.

    Attributes:
        rates: Directed rates keyed "FROM_TO_TO" (1 FROM = rate × TO)
        source: "manual" (user override) or "live" (fetched by the caller)
        updated_at: When the snapshot was taken

    Note:
        The set may be incomplete. Conversions that need an absent key
        raise MissingRateError at lookup time.
    """

    rates: dict[str, Decimal] = field(default_factory=dict)
    source: RateSource = RateSource.MANUAL
    updated_at: datetime | None = None

    @classmethod
    def from_mapping(
            cls,
            rates: Mapping[str, Number],
            source: RateSource | str = RateSource.MANUAL,
            updated_at: datetime | None = None,
    ) -> ExchangeRateSet:
        """
        Build a rate set from a plain mapping.

        Keys are normalized to upper case and validated; values are coerced
        to Decimal and must be positive.

        Raises:
            InvalidCurrencyError: If a key names an unsupported currency
            ValidationError: If a key is malformed or a rate is not positive
        """
        normalized: dict[str, Decimal] = {}
        for key, value in rates.items():
            from_currency, to_currency = _parse_rate_key(key)
            if from_currency == to_currency:
                raise ValidationError(
                    f"Rate key '{key}' maps a currency to itself",
                    field="rates",
                )
            try:
                rate = to_decimal(value, field=key)
            except ValueError as exc:
                raise ValidationError(str(exc), field="rates") from exc
            if rate <= ZERO:
                raise ValidationError(
                    f"Exchange rate {key} must be positive, got {rate}",
                    field="rates",
                )
            normalized[rate_key(from_currency, to_currency)] = rate

        return cls(
            rates=normalized,
            source=RateSource(source),
            updated_at=updated_at,
        )

    def get(self, from_currency: Currency, to_currency: Currency) -> Decimal | None:
        """Directed rate or None if absent."""
        return self.rates.get(rate_key(from_currency, to_currency))

    def missing_pairs(self) -> list[str]:
        """Directed keys a complete snapshot would have but this one lacks."""
        return [key for key in REQUIRED_RATE_KEYS if key not in self.rates]

    @property
    def is_complete(self) -> bool:
        return not self.missing_pairs()


@dataclass(frozen=True)
class CurrencyValues:
    """
    One amount expressed in every supported currency.

    Attributes:
        value_sgd: Amount in SGD
        value_usd: Amount in USD
        value_inr: Amount in INR
    """

    value_sgd: Decimal
    value_usd: Decimal
    value_inr: Decimal

    @classmethod
    def zero(cls) -> CurrencyValues:
        return cls(value_sgd=ZERO, value_usd=ZERO, value_inr=ZERO)

    def in_currency(self, currency: Currency) -> Decimal:
        """Value in the requested currency."""
        if currency == Currency.SGD:
            return self.value_sgd
        if currency == Currency.USD:
            return self.value_usd
        return self.value_inr

    def __add__(self, other: CurrencyValues) -> CurrencyValues:
        return CurrencyValues(
            value_sgd=self.value_sgd + other.value_sgd,
            value_usd=self.value_usd + other.value_usd,
            value_inr=self.value_inr + other.value_inr,
        )


# =============================================================================
# CONVERTER
# =============================================================================

class CurrencyConverter:
    """
    Stateless converter between the supported currencies.

    All methods receive the rate set explicitly; the converter caches
    nothing, so one instance can serve any number of users and threads.
    """

    def get_rate(
            self,
            from_currency: Currency | str,
            to_currency: Currency | str,
            rates: ExchangeRateSet,
    ) -> Decimal:
        """
        Look up the directed rate FROM → TO.

        Returns:
            Decimal("1") for identical currencies, otherwise the rate

        Raises:
            InvalidCurrencyError: If either code is unsupported
            MissingRateError: If the directed rate is absent
        """
        source = parse_currency(from_currency)
        target = parse_currency(to_currency)

        if source == target:
            return Decimal("1")

        rate = rates.get(source, target)
        if rate is None:
            raise MissingRateError(source.value, target.value)
        return rate

    def convert(
            self,
            amount: Decimal,
            from_currency: Currency | str,
            to_currency: Currency | str,
            rates: ExchangeRateSet,
    ) -> Decimal:
        """
        Convert an amount between two currencies.

        Identity conversions return ``amount`` unchanged (no lookup, no
        rounding). Otherwise ``amount × rate`` at full Decimal precision.

        Raises:
            InvalidCurrencyError: If either code is unsupported
            MissingRateError: If the directed rate is absent
        """
        source = parse_currency(from_currency)
        target = parse_currency(to_currency)

        if source == target:
            return amount

        return amount * self.get_rate(source, target, rates)

    def convert_to_all(
            self,
            amount: Decimal,
            from_currency: Currency | str,
            rates: ExchangeRateSet,
    ) -> CurrencyValues:
        """
        Express an amount in all three currencies.

        The source currency's own slot is the amount itself.

        Raises:
            InvalidCurrencyError: If from_currency is unsupported
            MissingRateError: If either outbound rate is absent
        """
        source = parse_currency(from_currency)

        return CurrencyValues(
            value_sgd=self.convert(amount, source, Currency.SGD, rates),
            value_usd=self.convert(amount, source, Currency.USD, rates),
            value_inr=self.convert(amount, source, Currency.INR, rates),
        )
