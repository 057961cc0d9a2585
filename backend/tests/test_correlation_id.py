# tests/test_correlation_id.py
"""
Tests for correlation ID context management and the logging filter.
"""

import json
import logging
from decimal import Decimal

import pytest

from finengine.utils.context import (
    clear_correlation_id,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)
from finengine.utils.logging import (
    NO_CORRELATION_ID,
    CorrelationIdFilter,
    JsonFormatter,
    _get_log_level,
    get_logger,
    setup_logging,
)


class TestCorrelationIdContext:
    """Tests for correlation ID context functions."""

    def test_get_returns_none_when_not_set(self):
        """Should return None when correlation ID is not set."""
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_set_and_get_correlation_id(self):
        """Should set and retrieve correlation ID."""
        set_correlation_id("test-correlation-123")
        assert get_correlation_id() == "test-correlation-123"
        clear_correlation_id()

    def test_clear_correlation_id(self):
        """Should clear correlation ID."""
        set_correlation_id("test-correlation-456")
        clear_correlation_id()
        assert get_correlation_id() is None


class TestCorrelationScope:
    """Tests for the correlation_scope context manager."""

    def test_generates_id_when_not_provided(self):
        """Should bind a fresh uuid4 hex when nothing is set."""
        with correlation_scope() as run_id:
            assert get_correlation_id() == run_id
            assert len(run_id) == 32

        assert get_correlation_id() is None

    def test_uses_provided_id(self):
        with correlation_scope("run-42") as run_id:
            assert run_id == "run-42"
            assert get_correlation_id() == "run-42"

    def test_reuses_outer_id(self):
        """Nested scopes keep the caller's ID end to end."""
        set_correlation_id("request-1")

        with correlation_scope() as run_id:
            assert run_id == "request-1"

        assert get_correlation_id() == "request-1"

    def test_restores_previous_id_after_error(self):
        set_correlation_id("outer")

        with pytest.raises(RuntimeError):
            with correlation_scope("inner"):
                raise RuntimeError("boom")

        assert get_correlation_id() == "outer"

    def test_different_scopes_get_different_ids(self):
        with correlation_scope() as first:
            pass
        with correlation_scope() as second:
            pass

        assert first != second


class TestCorrelationIdFilter:
    """Tests for the logging filter and JSON formatter."""

    @staticmethod
    def _record(message: str = "hello") -> logging.LogRecord:
        return logging.LogRecord(
            name="finengine.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg=message,
            args=(),
            exc_info=None,
        )

    def test_filter_adds_current_id(self):
        record = self._record()

        with correlation_scope("abc-123"):
            assert CorrelationIdFilter().filter(record) is True

        assert record.correlation_id == "abc-123"

    def test_filter_uses_placeholder_without_id(self):
        record = self._record()
        CorrelationIdFilter().filter(record)

        assert record.correlation_id == NO_CORRELATION_ID

    def test_json_formatter_includes_id_and_extra(self):
        record = self._record("fixed")
        record.correlation_id = "abc-123"
        record.holding_id = "h-1"

        entry = json.loads(JsonFormatter().format(record))

        assert entry["correlation_id"] == "abc-123"
        assert entry["message"] == "fixed"
        assert entry["extra"] == {"holding_id": "h-1"}

    def test_json_formatter_stringifies_non_json_extra(self):
        record = self._record()
        record.correlation_id = "abc-123"
        record.amount = Decimal("10.50")

        entry = json.loads(JsonFormatter().format(record))

        assert entry["extra"]["amount"] == "10.50"


class TestLogLevelParsing:

    def test_accepts_case_insensitive_level(self):
        assert _get_log_level(" debug ") == logging.DEBUG
        assert _get_log_level("WARN") == logging.WARNING

    def test_rejects_unknown_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            _get_log_level("LOUD")

    def test_get_logger_returns_named_logger(self):
        assert get_logger("finengine.services").name == "finengine.services"


class TestSetupLogging:
    """Tests for setup_logging()."""

    @pytest.fixture
    def root_logger(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        yield root
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    def test_installs_single_handler_with_filter(self, root_logger):
        setup_logging(level="DEBUG", log_format="json")
        setup_logging(level="DEBUG", log_format="json")

        assert len(root_logger.handlers) == 1
        handler = root_logger.handlers[0]
        assert isinstance(handler.formatter, JsonFormatter)
        assert any(isinstance(f, CorrelationIdFilter) for f in handler.filters)
        assert root_logger.level == logging.DEBUG

    def test_text_format(self, root_logger):
        setup_logging(level="warning", log_format="text")

        handler = root_logger.handlers[0]
        assert not isinstance(handler.formatter, JsonFormatter)
        assert "%(correlation_id)s" in handler.formatter._fmt
        assert root_logger.level == logging.WARNING
