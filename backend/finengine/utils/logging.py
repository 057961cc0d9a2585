# backend/finengine/utils/logging.py
"""
Logging configuration for the engine.

This module provides centralized logging setup with:
- Settings-based log levels (LOG_LEVEL)
- Correlation ID on every record, so one engine run can be traced
- JSON format option for log aggregation

The engine modules only ever call ``logging.getLogger(__name__)``. Hosting
processes (the dashboard backend, scripts, jobs) call ``setup_logging()``
once at startup.

Log Levels:
    DEBUG   - Per-holding / per-year calculation detail
    INFO    - Run summaries (totals, number of years derived)
    WARNING - Reconciliation mismatches and every applied fix (audit trail)
    ERROR   - Failures surfaced to the caller

Environment Configuration:
    LOG_LEVEL=DEBUG       # Development - see everything
    LOG_LEVEL=INFO        # Production - summaries + problems
    LOG_FORMAT=json       # Machine-readable logs
    LOG_FORMAT=text       # Human-readable logs (default)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from finengine.config import settings
from finengine.utils.context import get_correlation_id

# =============================================================================
# CONSTANTS
# =============================================================================

# Default text format: timestamp | level | correlation_id | logger_name | message
DEFAULT_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Placeholder when no correlation ID is available
NO_CORRELATION_ID = "no-correlation-id"

# Standard LogRecord attributes excluded from the JSON "extra" block
_STANDARD_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "correlation_id", "message", "taskName",
}


# =============================================================================
# CORRELATION ID FILTER
# =============================================================================

class CorrelationIdFilter(logging.Filter):
    """
    Logging filter that adds the run's correlation ID to log records.

    Access in format string: %(correlation_id)s
    """

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        record.correlation_id = correlation_id or NO_CORRELATION_ID
        return True


# =============================================================================
# JSON FORMATTER
# =============================================================================

class JsonFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Output format:
    {
        "timestamp": "2024-01-15T10:30:00.123Z",
        "level": "INFO",
        "logger": "finengine.services.engine",
        "correlation_id": "abc-123-def",
        "message": "Evaluated dataset for user u-1",
        "extra": { ... }  // Any extra fields passed to logger
    }

    Decimal and other non-JSON values in ``extra`` are rendered with str().
    """

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", NO_CORRELATION_ID)

        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "correlation_id": correlation_id,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra = {}
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                try:
                    json.dumps(value)
                    extra[key] = value
                except (TypeError, ValueError):
                    extra[key] = str(value)

        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry)


# =============================================================================
# SETUP FUNCTION
# =============================================================================

def setup_logging(
        level: str | None = None,
        log_format: str | None = None,
) -> None:
    """
    Configure process-wide logging with correlation ID support.

    Call once at startup of whatever process hosts the engine.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to settings.log_level.
        log_format: Output format ('text' or 'json').
                    Defaults to settings.log_format.

    Example:
        setup_logging()                                   # from environment
        setup_logging(level="DEBUG", log_format="text")   # local debugging
    """
    log_level_str = level or settings.log_level
    log_level = _get_log_level(log_level_str)

    format_type = log_format or settings.log_format

    if format_type.lower() == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt=DEFAULT_TEXT_FORMAT,
            datefmt=DEFAULT_DATE_FORMAT,
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Replace existing handlers so repeated calls don't duplicate output
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured: level={log_level_str}, format={format_type}",
        extra={"config": {"level": log_level_str, "format": format_type}},
    )


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _get_log_level(level_str: str) -> int:
    """
    Convert string log level to logging constant.

    Raises:
        ValueError: If level_str is not a valid log level
    """
    level_str = level_str.upper().strip()

    level_mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    if level_str not in level_mapping:
        valid_levels = ", ".join(level_mapping.keys())
        raise ValueError(
            f"Invalid log level: '{level_str}'. "
            f"Valid levels are: {valid_levels}"
        )

    return level_mapping[level_str]


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the given name.

    The correlation ID is added to every record by the filter installed
    in setup_logging().
    """
    return logging.getLogger(name)
