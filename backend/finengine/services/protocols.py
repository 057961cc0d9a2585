# backend/finengine/services/protocols.py
"""
Protocol interfaces for service dependency injection.

Using typing.Protocol enables structural subtyping:
- Existing classes satisfy protocols without modification
- Test mocks work without explicit inheritance
- Clear documentation of required interfaces
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from finengine.models import Currency
    from finengine.services.currency_converter import CurrencyValues, ExchangeRateSet


class CurrencyConverterProtocol(Protocol):
    """Interface required by CostBasisTracker and PortfolioValuator."""

    def convert(
        self,
        amount: Decimal,
        from_currency: Currency | str,
        to_currency: Currency | str,
        rates: ExchangeRateSet,
    ) -> Decimal:
        ...

    def convert_to_all(
        self,
        amount: Decimal,
        from_currency: Currency | str,
        rates: ExchangeRateSet,
    ) -> CurrencyValues:
        ...
