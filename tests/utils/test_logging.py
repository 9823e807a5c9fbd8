"""
Unit tests for logging setup module.

This module contains tests for logging configuration, structured formatting,
and the performance decorator.
"""

import json
import logging
import logging.handlers
import sys
import tempfile
from pathlib import Path

import pytest

from dynamo_geo.utils.logging_setup import (
    JSONFormatter,
    get_logger,
    log_performance,
    setup_logging,
)


def make_record(msg="Test message", level=logging.INFO, exc_info=None):
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info
    )
    record.funcName = "test_function"
    record.module = "test_module"
    return record


class TestJSONFormatter:
    """Test suite for JSONFormatter class."""

    def test_json_formatter_basic(self):
        """Test basic JSON formatting."""
        formatter = JSONFormatter(datefmt='%Y-%m-%d %H:%M:%S')

        parsed = json.loads(formatter.format(make_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test.logger"
        assert parsed["message"] == "Test message"
        assert parsed["module"] == "test_module"
        assert parsed["function"] == "test_function"
        assert parsed["line"] == 42
        assert "thread" in parsed
        assert "timestamp" in parsed

    def test_json_formatter_with_exception(self):
        """Test JSON formatting with exception information."""
        formatter = JSONFormatter()

        try:
            raise ValueError("Test exception")
        except ValueError:
            record = make_record("Error occurred", logging.ERROR, sys.exc_info())

        parsed = json.loads(formatter.format(record))

        assert parsed["level"] == "ERROR"
        assert "ValueError" in parsed["exception"]

    def test_json_formatter_with_extra_fields(self):
        """Test extra fields are included and non-JSON values are stringified."""
        formatter = JSONFormatter()
        record = make_record()
        record.partition = 3
        record.table = Path("geo-points")

        parsed = json.loads(formatter.format(record))

        assert parsed["partition"] == 3
        assert parsed["table"] == "geo-points"
        assert "msg" not in parsed
        assert "args" not in parsed


class TestSetupLogging:
    """Test suite for setup_logging function."""

    def setup_method(self):
        """Reset logging configuration before each test."""
        logger = logging.getLogger()
        logger.handlers.clear()
        logger.setLevel(logging.WARNING)

    def test_setup_logging_development(self):
        """Test logging setup for development environment."""
        setup_logging(environment="development", log_level="DEBUG")

        logger = logging.getLogger()
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

        handler = logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert not isinstance(handler.formatter, JSONFormatter)

    def test_setup_logging_production(self):
        """Test logging setup for production environment."""
        setup_logging(environment="production", log_level="INFO")

        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)

    def test_setup_logging_with_log_dir(self):
        """Test logging setup with a log directory that does not exist yet."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_dir = Path(temp_dir) / "logs"
            setup_logging(environment="development", log_level="INFO", log_dir=str(log_dir))

            logger = logging.getLogger()
            file_handlers = [h for h in logger.handlers
                             if isinstance(h, logging.handlers.RotatingFileHandler)]
            assert len(file_handlers) == 1
            assert (log_dir / "dynamo_geo_development.log").exists()

            for handler in file_handlers:
                handler.close()
            logger.handlers.clear()

    def test_setup_logging_removes_existing_handlers(self):
        """Test that setup_logging removes existing handlers."""
        logger = logging.getLogger()
        dummy_handler = logging.StreamHandler()
        logger.addHandler(dummy_handler)

        setup_logging(environment="development")

        assert len(logger.handlers) == 1
        assert logger.handlers[0] is not dummy_handler

    def test_setup_logging_sets_aws_sdk_levels(self):
        """Test that the AWS SDK loggers are quietened."""
        setup_logging(environment="development", log_level="DEBUG")

        assert logging.getLogger("boto3").level == logging.WARNING
        assert logging.getLogger("botocore").level == logging.WARNING
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_setup_logging_invalid_level(self):
        """Test that setup_logging rejects unknown log levels."""
        with pytest.raises(AttributeError):
            setup_logging(environment="development", log_level="INVALID")


class TestGetLogger:
    """Test suite for get_logger function."""

    def test_get_logger_returns_named_logger(self):
        logger = get_logger("test.module")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"
        assert get_logger("test.module") is logger


class TestLogPerformance:
    """Test suite for log_performance decorator."""

    def test_log_performance_success(self, caplog):
        """Test log_performance decorator with successful function."""
        @log_performance
        def plan_query(table, limit=None):
            return f"{table}-{limit}"

        with caplog.at_level(logging.DEBUG):
            result = plan_query("geo-points", limit=10)

        assert result == "geo-points-10"
        assert "Starting plan_query" in caplog.text
        assert "Completed plan_query" in caplog.text

    def test_log_performance_with_exception(self, caplog):
        """Test log_performance re-raises after logging the failure."""
        @log_performance
        def plan_query():
            raise ValueError("Test error")

        with caplog.at_level(logging.INFO):
            with pytest.raises(ValueError):
                plan_query()

        assert "Failed plan_query" in caplog.text
        assert "Test error" in caplog.text

    def test_log_performance_preserves_metadata(self):
        """Test that log_performance preserves function metadata."""
        @log_performance
        def plan_query():
            """Plan docstring."""

        assert plan_query.__name__ == "plan_query"
        assert plan_query.__doc__ == "Plan docstring."


class TestLoggingIntegration:
    """Integration tests for logging components."""

    def test_json_logging_output_format(self):
        """Test that JSON logging writes parseable lines to the log file."""
        with tempfile.TemporaryDirectory() as temp_dir:
            setup_logging(environment="production", log_level="INFO", log_dir=temp_dir)

            logger = get_logger("test.module")
            logger.info("Partition completed", extra={"partition": 2, "items": 17})

            root = logging.getLogger()
            for handler in root.handlers:
                handler.flush()

            log_file = Path(temp_dir) / "dynamo_geo_production.log"
            parsed = json.loads(log_file.read_text().strip().splitlines()[-1])
            assert parsed["message"] == "Partition completed"
            assert parsed["partition"] == 2
            assert parsed["items"] == 17

            for handler in root.handlers:
                handler.close()
            root.handlers.clear()
