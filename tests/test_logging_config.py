"""Tests for logging configuration and context."""

import json
import logging
import sys

from recipecart.logging_config import (
    ContextLogger,
    ContextualFormatter,
    LoggingContext,
    StructuredJsonFormatter,
    configure_logging,
    get_logger,
    list_key_ctx,
    owner_id_ctx,
    request_id_ctx,
    set_context,
)


def make_record(message: str = "Added 2 entries", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="recipecart.shopping.shopping_list",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestLoggingContext:
    """Tests for context variables."""

    def test_set_context(self):
        """Test values are set and None leaves a variable alone."""
        set_context(request_id="req-1", owner_id="owner-1")
        set_context(list_key="flour")

        assert request_id_ctx.get() == "req-1"
        assert owner_id_ctx.get() == "owner-1"
        assert list_key_ctx.get() == "flour"

    def test_context_manager_restores(self):
        """Test values are restored on exit, including nested use."""
        set_context(owner_id="outer")

        with LoggingContext(owner_id="inner", list_key="egg"):
            assert owner_id_ctx.get() == "inner"
            with LoggingContext(list_key="milk"):
                assert list_key_ctx.get() == "milk"
                assert owner_id_ctx.get() == "inner"
            assert list_key_ctx.get() == "egg"

        assert owner_id_ctx.get() == "outer"
        assert list_key_ctx.get() is None


class TestFormatters:
    """Tests for log formatters."""

    def test_json_formatter(self):
        """Test JSON output includes context and location."""
        with LoggingContext(request_id="req-1", list_key="tomato"):
            payload = json.loads(StructuredJsonFormatter().format(make_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "recipecart.shopping.shopping_list"
        assert payload["message"] == "Added 2 entries"
        assert payload["request_id"] == "req-1"
        assert payload["list_key"] == "tomato"
        assert "owner_id" not in payload
        assert payload["location"]["line"] == 10

    def test_json_formatter_keeps_unicode(self):
        """Test non-ASCII messages are not escaped."""
        output = StructuredJsonFormatter().format(make_record("Bread · Cake"))
        assert "Bread · Cake" in output

    def test_json_formatter_exception(self):
        """Test exceptions are included."""
        try:
            raise ValueError("List name cannot be empty")
        except ValueError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        payload = json.loads(StructuredJsonFormatter().format(record))
        assert "List name cannot be empty" in payload["exception"]

    def test_contextual_formatter(self):
        """Test the text format with context."""
        with LoggingContext(request_id="0123456789abcdef", owner_id="owner-1", list_key="egg"):
            output = ContextualFormatter().format(make_record())

        assert "| INFO     |" in output
        assert "[req=01234567, owner=owner-1, item=egg]" in output
        assert output.endswith("| Added 2 entries")

    def test_contextual_formatter_without_context(self):
        """Test no brackets are added without context."""
        output = ContextualFormatter().format(make_record())
        assert "[" not in output


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_adapter(self):
        """Test a context adapter for the named logger."""
        logger = get_logger("recipecart.test")
        assert isinstance(logger, ContextLogger)
        assert logger.logger.name == "recipecart.test"

    def test_context_added_to_record(self, caplog):
        """Test context values land on the log record."""
        caplog.set_level(logging.INFO, logger="recipecart.test")

        with LoggingContext(owner_id="owner-1"):
            get_logger("recipecart.test").info("Cleared list")

        (record,) = caplog.records
        assert record.owner_id == "owner-1"


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_text_handler(self, restore_root_logger):
        """Test a console handler with the text formatter."""
        configure_logging(log_level="debug", json_format=False)

        (handler,) = restore_root_logger.handlers
        assert isinstance(handler.formatter, ContextualFormatter)
        assert restore_root_logger.level == logging.DEBUG
        assert logging.getLogger("recipecart.shopping").level == logging.DEBUG

    def test_level_from_settings(self, monkeypatch, restore_root_logger):
        """Test the default level comes from settings."""
        monkeypatch.setenv("RECIPECART_LOG_LEVEL", "WARNING")
        configure_logging(json_format=True)

        assert restore_root_logger.level == logging.WARNING
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredJsonFormatter)

    def test_log_file(self, tmp_path, restore_root_logger):
        """Test logs are also written to a file."""
        log_file = tmp_path / "recipecart.log"
        configure_logging(log_level="INFO", json_format=True, log_file=str(log_file))

        for handler in restore_root_logger.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"].startswith("Logging configured")
