# backend/finengine/services/valuation/calculators.py
"""
Cost basis calculators.

CostBasisTracker owns three operations that must never be confused:

- apply_lot / apply_lot_to_holding: a PURCHASE. Blends the new lot into the
  weighted-average unit cost and grows the quantity.
- set_current_price: a MARKET REFRESH. Replaces the current unit price and
  its source tag. Quantity and unit cost are never touched.
- reconcile / fix_stored_values: a DIAGNOSTIC. Compares quantity × price
  with the stored value. Read-only unless fix mode is invoked explicitly.

Weighted Average Cost:
    new_unit_cost = (q_old × c_old + q_new × c_new) / (q_old + q_new)

    Example: 500 @ 4.40 + 200 @ 15.00
        = (2200 + 3000) / 700
        = 7.428571...

Design Principles:
- Stateless apart from injected tolerances and converter
- Receives all inputs explicitly, returns new objects
- Uses Decimal for ALL financial calculations, no intermediate rounding

Usage:
    tracker = CostBasisTracker()
    result = tracker.apply_lot(500, "4.40", 200, "15.00")
    holding = tracker.set_current_price(holding, Decimal("16.10"), "fmp", now)
    report = tracker.reconcile(holding)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from finengine.config import settings
from finengine.models import Holding
from finengine.services.constants import (
    CONSISTENCY_FIX_SOURCE,
    HUNDRED,
    LARGE_PRICE_MOVE_PERCENT,
    ZERO,
)
from finengine.services.currency_converter import (
    CurrencyConverter,
    CurrencyValues,
    ExchangeRateSet,
)
from finengine.services.exceptions import InvalidLotError, InvalidPriceError
from finengine.services.protocols import CurrencyConverterProtocol
from finengine.services.valuation.types import (
    CostBasisUpdate,
    LotEvent,
    LotResult,
    ReconciliationFix,
    ReconciliationReport,
    ReconciliationStatus,
)
from finengine.utils.money import Number, quantize_money, to_decimal

logger = logging.getLogger(__name__)


# =============================================================================
# COST BASIS TRACKER
# =============================================================================

class CostBasisTracker:
    """
    Maintains weighted-average cost basis and checks stored values.

    Args:
        converter: Used by fix mode to rebuild all three stored values
        tolerance_percent: Relative divergence (%) that flags a holding
        tolerance_absolute: Absolute divergence (native units) that flags a holding
        large_move_percent: Price vs unit cost move (%) reported as large

    Note:
        Concurrent updates to the SAME holding must be serialized by the
        caller. apply_lot is a read-modify-write over caller-owned state.
    """

    def __init__(
            self,
            converter: CurrencyConverterProtocol | None = None,
            tolerance_percent: Decimal | None = None,
            tolerance_absolute: Decimal | None = None,
            large_move_percent: Decimal = LARGE_PRICE_MOVE_PERCENT,
    ) -> None:
        self._converter = converter or CurrencyConverter()
        self.tolerance_percent = (
            settings.reconciliation_tolerance_percent
            if tolerance_percent is None else tolerance_percent
        )
        self.tolerance_absolute = (
            settings.reconciliation_tolerance_absolute
            if tolerance_absolute is None else tolerance_absolute
        )
        self.large_move_percent = large_move_percent

    # =========================================================================
    # LOTS
    # =========================================================================

    def apply_lot(
            self,
            existing_quantity: Number,
            existing_unit_cost: Number,
            new_quantity: Number,
            new_unit_cost: Number,
    ) -> LotResult:
        """
        Blend a new lot into an existing position.

        Args:
            existing_quantity: Units already held (>= 0)
            existing_unit_cost: Current weighted unit cost (>= 0)
            new_quantity: Units bought (> 0)
            new_unit_cost: Price per unit of the new lot (>= 0)

        Returns:
            LotResult with combined quantity and weighted unit cost

        Raises:
            InvalidLotError: Non-positive lot quantity, negative price,
                or negative existing quantity

        Note:
            An empty existing position returns new_unit_cost as-is.
        """
        existing_qty = self._lot_decimal(existing_quantity, "existing_quantity")
        existing_cost = self._lot_decimal(existing_unit_cost, "existing_unit_cost")
        new_qty = self._lot_decimal(new_quantity, "new_quantity")
        new_cost = self._lot_decimal(new_unit_cost, "new_unit_cost")

        if new_qty <= ZERO:
            raise InvalidLotError(
                f"quantity must be positive, got {new_qty}",
                quantity=new_qty,
                unit_cost=new_cost,
                field="new_quantity",
            )
        if new_cost < ZERO:
            raise InvalidLotError(
                f"price cannot be negative, got {new_cost}",
                quantity=new_qty,
                unit_cost=new_cost,
                field="new_unit_cost",
            )
        if existing_cost < ZERO:
            raise InvalidLotError(
                f"existing unit cost cannot be negative, got {existing_cost}",
                quantity=new_qty,
                unit_cost=new_cost,
                field="existing_unit_cost",
            )
        if existing_qty < ZERO:
            raise InvalidLotError(
                f"existing quantity cannot be negative, got {existing_qty}",
                quantity=new_qty,
                unit_cost=new_cost,
                field="existing_quantity",
            )

        if existing_qty == ZERO:
            return LotResult(quantity=new_qty, unit_cost=new_cost)

        combined_qty = existing_qty + new_qty
        weighted_cost = (
            existing_qty * existing_cost + new_qty * new_cost
        ) / combined_qty

        logger.debug(
            f"Lot applied: {existing_qty} @ {existing_cost} + {new_qty} @ {new_cost} "
            f"= {combined_qty} @ {weighted_cost}"
        )

        return LotResult(quantity=combined_qty, unit_cost=weighted_cost)

    def apply_lot_to_holding(self, holding: Holding, lot: LotEvent) -> CostBasisUpdate:
        """
        Apply a lot to a holding and return the updated holding.

        A value-only holding (quantity None) is treated as an empty position,
        so the lot starts unit tracking for it.

        Raises:
            InvalidLotError: As apply_lot, or the holding has units but no
                recorded unit cost to blend against
        """
        previous_qty = holding.quantity if holding.quantity is not None else ZERO

        if holding.unit_cost is None and previous_qty > ZERO:
            raise InvalidLotError(
                f"{holding.symbol} holds {previous_qty} units with no unit cost",
                quantity=lot.quantity,
                unit_cost=lot.unit_cost,
                field="unit_cost",
            )
        previous_cost = holding.unit_cost if holding.unit_cost is not None else ZERO

        result = self.apply_lot(previous_qty, previous_cost, lot.quantity, lot.unit_cost)
        updated = replace(holding, quantity=result.quantity, unit_cost=result.unit_cost)

        logger.info(
            f"Cost basis updated for {holding.symbol}: "
            f"{previous_qty} → {result.quantity} units, "
            f"unit cost {previous_cost} → {result.unit_cost}"
        )

        return CostBasisUpdate(
            holding=updated,
            lot=lot,
            result=result,
            previous_quantity=previous_qty,
            previous_unit_cost=previous_cost,
        )

    # =========================================================================
    # PRICE REFRESH
    # =========================================================================

    def set_current_price(
            self,
            holding: Holding,
            price: Number,
            source: str,
            timestamp: datetime,
    ) -> Holding:
        """
        Record a new current unit price.

        Only current_unit_price, price_source and price_updated change.
        Stored values are left alone so that reconcile() can report the
        divergence until the caller refreshes them.

        Raises:
            InvalidPriceError: If price is negative
        """
        try:
            new_price = to_decimal(price, field="current_unit_price")
        except ValueError as exc:
            raise InvalidPriceError(holding.symbol, price) from exc
        if new_price < ZERO:
            raise InvalidPriceError(holding.symbol, new_price)

        logger.debug(
            f"Price for {holding.symbol} set to {new_price} ({source}), "
            f"was {holding.current_unit_price}"
        )

        return replace(
            holding,
            current_unit_price=new_price,
            price_source=source,
            price_updated=timestamp,
        )

    # =========================================================================
    # RECONCILIATION
    # =========================================================================

    def reconcile(self, holding: Holding) -> ReconciliationReport:
        """
        Compare quantity × current price with the stored native value.

        A holding is INCONSISTENT when the absolute difference exceeds
        tolerance_absolute OR the relative difference (over the calculated
        value) exceeds tolerance_percent. A calculated value of 0 against a
        non-zero stored value is always inconsistent.

        Holdings without quantity or price are UNPRICED and never flagged.
        """
        stored = holding.stored_native_value
        price_change = self._price_change_percent(holding)
        large_move = (
            price_change is not None and abs(price_change) > self.large_move_percent
        )

        if not holding.is_priced:
            return ReconciliationReport(
                holding_id=holding.id,
                symbol=holding.symbol,
                currency=holding.currency,
                status=ReconciliationStatus.UNPRICED,
                calculated_value=None,
                stored_value=stored,
                delta=None,
                delta_percent=None,
                price_change_percent=price_change,
                large_price_move=large_move,
                missing_price_source=False,
            )

        calculated = holding.quantity * holding.current_unit_price
        delta = calculated - stored
        difference = abs(delta)

        if calculated == ZERO:
            delta_percent = None
            inconsistent = difference > ZERO
        else:
            delta_percent = difference / abs(calculated) * HUNDRED
            inconsistent = (
                difference > self.tolerance_absolute
                or delta_percent > self.tolerance_percent
            )

        status = (
            ReconciliationStatus.INCONSISTENT if inconsistent
            else ReconciliationStatus.CONSISTENT
        )

        if inconsistent:
            logger.warning(
                f"Value mismatch for {holding.symbol}: calculated {calculated} "
                f"vs stored {stored} {holding.currency.value} (Δ {delta})"
            )

        return ReconciliationReport(
            holding_id=holding.id,
            symbol=holding.symbol,
            currency=holding.currency,
            status=status,
            calculated_value=calculated,
            stored_value=stored,
            delta=delta,
            delta_percent=delta_percent,
            price_change_percent=price_change,
            large_price_move=large_move,
            missing_price_source=not holding.price_source,
        )

    def reconcile_all(self, holdings: Iterable[Holding]) -> list[ReconciliationReport]:
        """One report per holding, in input order."""
        reports = [self.reconcile(holding) for holding in holdings]

        flagged = sum(1 for report in reports if not report.consistent)
        logger.info(f"Reconciled {len(reports)} holdings, {flagged} inconsistent")

        return reports

    def fix_stored_values(
            self,
            holding: Holding,
            rates: ExchangeRateSet,
            timestamp: datetime,
    ) -> ReconciliationFix:
        """
        Fix mode: overwrite stored values of an inconsistent holding.

        The native value becomes quantity × current price; the other two
        currencies are converted from it with the supplied rates. All three
        are rounded to cents, price_source is set to "consistency_fix" and
        price_updated to timestamp. Every applied fix is logged at WARNING.

        Consistent and unpriced holdings come back unchanged (applied=False).

        Raises:
            MissingRateError: If the rate set cannot convert out of the
                holding's currency (nothing is changed)
        """
        report = self.reconcile(holding)
        previous = CurrencyValues(
            value_sgd=holding.value_sgd,
            value_usd=holding.value_usd,
            value_inr=holding.value_inr,
        )

        if report.status != ReconciliationStatus.INCONSISTENT:
            return ReconciliationFix(
                holding=holding,
                report=report,
                previous_values=previous,
                corrected_values=previous,
                applied=False,
            )

        converted = self._converter.convert_to_all(
            report.calculated_value, holding.currency, rates
        )
        corrected = CurrencyValues(
            value_sgd=quantize_money(converted.value_sgd),
            value_usd=quantize_money(converted.value_usd),
            value_inr=quantize_money(converted.value_inr),
        )

        fixed = replace(
            holding,
            value_sgd=corrected.value_sgd,
            value_usd=corrected.value_usd,
            value_inr=corrected.value_inr,
            price_source=CONSISTENCY_FIX_SOURCE,
            price_updated=timestamp,
        )

        logger.warning(
            f"Consistency fix applied to {holding.symbol} ({holding.id}): "
            f"{holding.currency.value} {report.stored_value} → {corrected.in_currency(holding.currency)}",
            extra={
                "holding_id": holding.id,
                "previous_values": previous,
                "corrected_values": corrected,
            },
        )

        return ReconciliationFix(
            holding=fixed,
            report=report,
            previous_values=previous,
            corrected_values=corrected,
            applied=True,
            fixed_at=timestamp,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _lot_decimal(value: Number, field: str) -> Decimal:
        try:
            return to_decimal(value, field=field)
        except ValueError as exc:
            raise InvalidLotError(str(exc), field=field) from exc

    @staticmethod
    def _price_change_percent(holding: Holding) -> Decimal | None:
        """Current price vs weighted unit cost, or None if either is unknown."""
        if holding.current_unit_price is None or not holding.unit_cost:
            return None
        return (
            (holding.current_unit_price - holding.unit_cost) / holding.unit_cost * HUNDRED
        )
