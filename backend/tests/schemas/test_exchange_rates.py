# backend/tests/schemas/test_exchange_rates.py
"""
Tests for exchange rate schemas.

This module tests:
- Rate key aliases and positivity constraints
- Source validation
- Conversion to ExchangeRateSet
"""

import datetime as dt
from decimal import Decimal

import pytest
from pydantic import ValidationError

from finengine.models import Currency, RateSource
from finengine.schemas import ExchangeRateSetInput


def _payload(**overrides) -> dict:
    payload = {
        "SGD_TO_USD": "0.74",
        "SGD_TO_INR": "61.50",
        "USD_TO_SGD": "1.35",
        "USD_TO_INR": "83.10",
        "INR_TO_SGD": "0.0163",
        "INR_TO_USD": "0.012",
    }
    payload.update(overrides)
    return payload


class TestExchangeRateSetInput:
    """Tests for ExchangeRateSetInput schema."""

    def test_valid_snapshot(self):
        """Should accept the six directed rates by display key."""
        data = ExchangeRateSetInput.model_validate(_payload())

        assert data.sgd_to_usd == Decimal("0.74")
        assert data.inr_to_usd == Decimal("0.012")
        assert data.source == "manual"

    def test_accepts_field_names(self):
        """populate_by_name allows snake_case keys too."""
        data = ExchangeRateSetInput(
            sgd_to_usd="0.74", sgd_to_inr="61.5", usd_to_sgd="1.35",
            usd_to_inr="83.1", inr_to_sgd="0.0163", inr_to_usd="0.012",
        )

        assert data.usd_to_inr == Decimal("83.1")

    def test_missing_rate_rejected(self):
        payload = _payload()
        del payload["INR_TO_USD"]

        with pytest.raises(ValidationError):
            ExchangeRateSetInput.model_validate(payload)

    @pytest.mark.parametrize("rate", ["0", "-1.35"])
    def test_non_positive_rate_rejected(self, rate):
        with pytest.raises(ValidationError):
            ExchangeRateSetInput.model_validate(_payload(USD_TO_SGD=rate))

    def test_unknown_source_rejected(self):
        with pytest.raises(ValidationError):
            ExchangeRateSetInput.model_validate(_payload(source="ecb"))

    def test_to_rate_set(self):
        updated = dt.datetime(2025, 3, 1, tzinfo=dt.timezone.utc)
        data = ExchangeRateSetInput.model_validate(
            _payload(source="live", updated_at=updated)
        )

        rate_set = data.to_rate_set()

        assert rate_set.is_complete
        assert rate_set.get(Currency.USD, Currency.SGD) == Decimal("1.35")
        assert rate_set.source == RateSource.LIVE
        assert rate_set.updated_at == updated
