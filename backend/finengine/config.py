# backend/finengine/config.py
"""
Engine configuration using Pydantic Settings.

Loads configuration from environment variables with validation:
- ENVIRONMENT: Runtime mode (development, test, production)
- LOG_LEVEL / LOG_FORMAT: Logging setup (see finengine.utils.logging)
- RECONCILIATION_TOLERANCE_*: When a stored holding value counts as drifted
- REBALANCE_THRESHOLD: Allocation drift (percentage points) that needs action
- CLAMP_MONTHLY_MARKET_GAINS: Keep or drop the non-negative clamp on
  market gains derived from monthly snapshots

The engine itself never reads these values mid-calculation. Every calculator
takes its tolerances as constructor arguments and only falls back to
``settings`` for defaults, so two calls with the same inputs always agree.

Usage:
    from finengine.config import settings

    tracker = CostBasisTracker(
        tolerance_percent=settings.reconciliation_tolerance_percent,
    )
"""
from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# The .env file lives at the repository root (parent of backend/)
_BACKEND_DIR = Path(__file__).resolve().parent.parent
_PROJECT_ROOT = _BACKEND_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Environment variables:
        - ENVIRONMENT: Runtime environment (development, test, production)
        - LOG_LEVEL: Logging level (default: "INFO")
        - LOG_FORMAT: "text" or "json" (default: "text")

    Valuation tolerances (optional, defaults match the dashboard's
    long-standing consistency check):
        - RECONCILIATION_TOLERANCE_PERCENT: Relative tolerance (default: 1)
        - RECONCILIATION_TOLERANCE_ABSOLUTE: Absolute tolerance in the
          holding's native currency (default: 10)
        - REBALANCE_THRESHOLD: Drift in percentage points (default: 5)
        - CLAMP_MONTHLY_MARKET_GAINS: Clamp rollup gains at zero (default: True)
    """

    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Runtime environment (development, test, production)"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        description="Log output format"
    )

    # =========================================================================
    # RECONCILIATION
    # =========================================================================
    reconciliation_tolerance_percent: Decimal = Field(
        default=Decimal("1"),
        description="Stored vs calculated value divergence (%) that flags a holding"
    )
    reconciliation_tolerance_absolute: Decimal = Field(
        default=Decimal("10"),
        description="Stored vs calculated value divergence (native units) that flags a holding"
    )

    # =========================================================================
    # ALLOCATION
    # =========================================================================
    rebalance_threshold: Decimal = Field(
        default=Decimal("5"),
        ge=0,
        le=100,
        description="Absolute drift in percentage points before a category needs rebalancing"
    )

    # =========================================================================
    # MONTHLY ROLLUP
    # =========================================================================
    clamp_monthly_market_gains: bool = Field(
        default=True,
        description="Clamp monthly-derived market gains at zero (hides loss years)"
    )

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_tolerances(self) -> "Settings":
        """Reject negative reconciliation tolerances."""
        if self.reconciliation_tolerance_percent < 0:
            raise ValueError(
                "RECONCILIATION_TOLERANCE_PERCENT cannot be negative, "
                f"got {self.reconciliation_tolerance_percent}"
            )
        if self.reconciliation_tolerance_absolute < 0:
            raise ValueError(
                "RECONCILIATION_TOLERANCE_ABSOLUTE cannot be negative, "
                f"got {self.reconciliation_tolerance_absolute}"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


# Create single instance
settings = Settings()
