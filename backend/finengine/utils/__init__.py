# backend/finengine/utils/__init__.py
"""
Utility modules for the engine.

This package contains cross-cutting utilities:
- logging: Logging configuration with correlation ID support
- context: Correlation ID storage for one engine run
- money: Decimal coercion, rounding and percentage helpers

Usage:
    from finengine.utils import setup_logging, get_logger
    from finengine.utils import correlation_scope
    from finengine.utils import to_decimal, quantize_money
"""

from finengine.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
    correlation_scope,
)
from finengine.utils.logging import setup_logging, get_logger
from finengine.utils.money import (
    to_decimal,
    to_decimal_or_none,
    quantize_money,
    quantize_percent,
    percent_of,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "correlation_scope",
    # Money
    "to_decimal",
    "to_decimal_or_none",
    "quantize_money",
    "quantize_percent",
    "percent_of",
]
