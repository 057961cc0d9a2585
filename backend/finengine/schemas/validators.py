# backend/finengine/schemas/validators.py
"""
Reusable validation functions for Pydantic schemas.

This module provides:
- Supported currency validation (SGD, USD, INR)
- Symbol normalization
- Year / month range checks

These validators ensure consistent input handling across all schemas.
"""

import re

from finengine.models import Currency

# =============================================================================
# CONSTANTS
# =============================================================================

# Symbols: tickers ("VWRA", "BRK.B") and labels ("CPF-OA", "SRS CASH")
SYMBOL_PATTERN = re.compile(r'^[A-Z0-9][A-Z0-9.\-_ ]{0,29}$')
SYMBOL_MAX_LENGTH = 30

SUPPORTED_CURRENCIES: tuple[str, ...] = tuple(c.value for c in Currency)

# Reasonable bounds for personal finance history
MIN_YEAR = 1900
MAX_YEAR = 2200


# =============================================================================
# CURRENCY VALIDATION
# =============================================================================

def validate_currency(value: str) -> str:
    """
    Validate and normalize a currency code.

    Args:
        value: Raw currency input (e.g., "sgd", " USD ")

    Returns:
        Normalized currency (uppercase, trimmed)

    Raises:
        ValueError: If currency is not SGD, USD or INR
    """
    if not value:
        raise ValueError("Currency cannot be empty")

    normalized = value.strip().upper()

    if normalized not in SUPPORTED_CURRENCIES:
        raise ValueError(
            f"Unsupported currency: '{normalized}'. "
            f"Valid options: {', '.join(SUPPORTED_CURRENCIES)}"
        )

    return normalized


# =============================================================================
# SYMBOL VALIDATION
# =============================================================================

def validate_symbol(value: str) -> str:
    """
    Validate and normalize a holding symbol.

    Raises:
        ValueError: If symbol is empty, too long or has invalid characters
    """
    if not value or not value.strip():
        raise ValueError("Symbol cannot be empty")

    normalized = value.strip().upper()

    if len(normalized) > SYMBOL_MAX_LENGTH:
        raise ValueError(f"Symbol cannot exceed {SYMBOL_MAX_LENGTH} characters")

    if not SYMBOL_PATTERN.match(normalized):
        raise ValueError(
            f"Invalid symbol format: '{normalized}'. "
            "Symbol must be alphanumeric and may include . - _ or spaces"
        )

    return normalized
