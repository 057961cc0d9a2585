#!/usr/bin/env python3
# backend/scripts/run_sample_report.py
"""
Run the engine on a built-in sample data set and log the report.

Useful for eyeballing formulas after a change, and for checking the
logging setup (text vs JSON, correlation IDs).

Usage:
    cd backend
    python -m scripts.run_sample_report
    LOG_FORMAT=json python -m scripts.run_sample_report
"""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

# Setup path to import finengine modules
backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from finengine.schemas import (
    AllocationTargetsInput,
    ExchangeRateSetInput,
    HoldingInput,
    MonthlySnapshotInput,
    YearlyRecordInput,
)
from finengine.services import FinancialEngine, ServiceError, UserDataSet
from finengine.utils import quantize_money, quantize_percent, setup_logging

logger = logging.getLogger(__name__)


SAMPLE_RATES = {
    "SGD_TO_USD": "0.74",
    "SGD_TO_INR": "61.50",
    "USD_TO_SGD": "1.35",
    "USD_TO_INR": "83.10",
    "INR_TO_SGD": "0.0163",
    "INR_TO_USD": "0.012",
    "source": "manual",
}

SAMPLE_HOLDINGS = [
    {"id": "h-1", "symbol": "VWRA", "currency": "USD", "category": "Core",
     "quantity": "500", "unit_cost": "110.20", "current_unit_price": "128.40",
     "value_usd": "64200", "price_source": "fmp"},
    {"id": "h-2", "symbol": "IREN", "currency": "USD", "category": "Growth",
     "quantity": "700", "unit_cost": "7.43", "current_unit_price": "16.10",
     "value_usd": "9800", "price_source": "manual"},
    {"id": "h-3", "symbol": "GLD", "currency": "USD", "category": "Hedge",
     "quantity": "20", "unit_cost": "180", "current_unit_price": "215",
     "value_usd": "4300"},
    {"id": "h-4", "symbol": "CASH", "currency": "SGD", "category": "Liquidity",
     "value_sgd": "15000"},
    {"id": "h-5", "symbol": "NIFTYBEES", "currency": "INR", "category": "Growth",
     "quantity": "1000", "unit_cost": "240", "current_unit_price": "265",
     "value_inr": "265000", "price_source": "manual"},
]

SAMPLE_YEARLY = [
    {"year": 2021, "income": "90000", "expenses": "50000", "net_worth": "60000"},
    {"year": 2022, "income": "100000", "expenses": "55000", "net_worth": "98000"},
    {"year": 2023, "income": "110000", "expenses": "60000", "net_worth": "150000"},
]

SAMPLE_MONTHLY = [
    {"year": 2024, "month": month, "income": "10000", "expenses": "5500",
     "portfolio_value": str(120000 + month * 2500), "net_worth": str(160000 + month * 3000)}
    for month in range(1, 13)
]


def build_dataset() -> UserDataSet:
    rates = ExchangeRateSetInput.model_validate(
        {**SAMPLE_RATES, "updated_at": datetime.now(timezone.utc)}
    ).to_rate_set()

    return UserDataSet(
        user_id="sample-user",
        holdings=[HoldingInput.model_validate(h).to_holding() for h in SAMPLE_HOLDINGS],
        rates=rates,
        yearly_records=[YearlyRecordInput.model_validate(r).to_record() for r in SAMPLE_YEARLY],
        monthly_snapshots=[
            MonthlySnapshotInput.model_validate(m).to_snapshot() for m in SAMPLE_MONTHLY
        ],
        allocation_targets=AllocationTargetsInput().as_targets(),
    )


def run_sample_report(display_currency: str = "SGD") -> None:
    engine = FinancialEngine()

    try:
        report = engine.evaluate(build_dataset(), display_currency, current_year=2025)
    except ServiceError as e:
        logger.error(f"❌ Evaluation failed: {e}")
        raise

    portfolio = report.portfolio
    currency = portfolio.display_currency.value

    logger.info("=" * 60)
    logger.info(f"PORTFOLIO ({currency})")
    logger.info("=" * 60)
    logger.info(f"  Total: {quantize_money(portfolio.total)}")
    for category, value in portfolio.by_category.items():
        logger.info(f"  {category:<10} {quantize_money(value):>14}")

    logger.info("=" * 60)
    logger.info("ALLOCATION DRIFT")
    logger.info("=" * 60)
    for row in report.allocation:
        flag = "⚠️ " if row.needs_rebalance else "✅"
        logger.info(
            f"  {flag} {row.category:<10} {quantize_percent(row.current_pct):>7}% "
            f"(target {row.target_pct}%, drift {quantize_percent(row.drift_pct)})"
        )

    logger.info("=" * 60)
    logger.info("RECONCILIATION")
    logger.info("=" * 60)
    for item in report.reconciliation:
        logger.info(f"  {item.symbol:<10} {item.status.value}")

    logger.info("=" * 60)
    logger.info("YEARLY SERIES")
    logger.info("=" * 60)
    for record in report.performance.series:
        logger.info(
            f"  {record.year}  savings {quantize_money(record.savings):>12}  "
            f"gains {quantize_money(record.market_gains):>12}  "
            f"return {quantize_percent(record.return_percent):>7}%  "
            f"[{record.provenance.value}]"
        )

    ytd = report.performance.ytd
    overall = report.performance.overall
    logger.info("=" * 60)
    logger.info(f"  {ytd.timeframe}: {quantize_money(ytd.total_gain)} ({quantize_percent(ytd.percentage_change)}%)")
    logger.info(
        f"  All time: {quantize_money(overall.total_gain)} "
        f"({quantize_percent(overall.percentage_change)}%)"
    )
    logger.info("=" * 60)


if __name__ == "__main__":
    setup_logging()
    run_sample_report(sys.argv[1] if len(sys.argv) > 1 else "SGD")
