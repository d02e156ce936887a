"""
Unit tests for the logging module.
"""

import json
import logging
import sys

import pytest
import structlog

from perfwatch.core.config import Environment, LogFormat, Settings
from perfwatch.core.logging import (
    JsonFormatter,
    LoggerFactory,
    StructuredFormatter,
    create_formatter,
    get_logger,
    setup_logging,
)


def make_record(msg="Collection finished", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="perfwatch.core.performance.monitor",
        level=level,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
        func="collect_metrics",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLoggerFactory:
    """Test logging initialization."""

    def test_get_logger_before_initialize(self):
        """Test loggers can be created at import time."""
        assert not LoggerFactory.is_initialized()

        logger = get_logger("perfwatch.test")

        assert logger is not None

    def test_setup_logging_creates_log_dir(self, mock_settings, temp_dir):
        setup_logging(mock_settings)

        assert LoggerFactory.is_initialized()
        assert (temp_dir / "logs").is_dir()

    def test_file_output(self, temp_dir):
        settings = Settings(
            environment=Environment.TESTING,
            logging={"file_path": temp_dir / "logs" / "perfwatch.log", "format": "json"},
        )
        setup_logging(settings)

        get_logger("perfwatch.test").warning("Collection overran its interval", skipped_ticks=2)
        for handler in logging.getLogger("perfwatch").handlers:
            handler.flush()

        lines = (temp_dir / "logs" / "perfwatch.log").read_text(encoding="utf-8").splitlines()
        entry = json.loads(lines[-1])
        assert entry["message"] == "Collection overran its interval"
        assert entry["level"] == "WARNING"
        assert entry["custom"] == {"skipped_ticks": 2}

    def test_json_chain_leaves_record_fields_to_formatter(self):
        """Test the JSON chain does not add logger, level or timestamp to the event."""
        json_chain = LoggerFactory._get_processors(LogFormat.JSON)
        simple_chain = LoggerFactory._get_processors(LogFormat.SIMPLE)

        assert json_chain[-1] is structlog.stdlib.render_to_log_kwargs
        assert structlog.stdlib.add_logger_name not in json_chain
        assert structlog.stdlib.add_log_level not in json_chain
        assert structlog.stdlib.add_logger_name in simple_chain
        assert isinstance(simple_chain[-1], structlog.processors.KeyValueRenderer)

    def test_development_uses_rich_console(self, temp_dir):
        settings = Settings(
            environment=Environment.DEVELOPMENT,
            logging={"file_path": temp_dir / "dev.log"},
        )
        LoggerFactory._settings = settings

        config = LoggerFactory._get_logging_config()

        assert config["handlers"]["rich"]["class"] == "rich.logging.RichHandler"
        assert config["loggers"]["perfwatch"]["handlers"] == ["rich", "file"]

    @pytest.mark.parametrize("log_format, formatter", [
        (LogFormat.JSON, "json"),
        (LogFormat.STRUCTURED, "structured"),
        (LogFormat.SIMPLE, "detailed"),
    ])
    def test_file_formatter_follows_format(self, temp_dir, log_format, formatter):
        LoggerFactory._settings = Settings(
            environment=Environment.TESTING,
            logging={"file_path": temp_dir / "app.log", "format": log_format},
        )

        config = LoggerFactory._get_logging_config()

        assert config["handlers"]["file"]["formatter"] == formatter

    @pytest.mark.parametrize("size, expected", [
        ("10MB", 10 * 1024 ** 2),
        ("512KB", 512 * 1024),
        ("1GB", 1024 ** 3),
        ("2048", 2048),
    ])
    def test_parse_size(self, size, expected):
        assert LoggerFactory._parse_size(size) == expected

    def test_stdlib_logger(self):
        assert LoggerFactory.get_stdlib_logger("perfwatch.x") is logging.getLogger("perfwatch.x")

    def test_reset(self, mock_settings):
        setup_logging(mock_settings)

        LoggerFactory.reset()

        assert not LoggerFactory.is_initialized()


class TestFormatters:
    """Test custom formatters."""

    def test_json_formatter(self):
        output = JsonFormatter().format(make_record(alert_id="database-errorRate-1"))

        data = json.loads(output)
        assert data["message"] == "Collection finished"
        assert data["logger"] == "perfwatch.core.performance.monitor"
        assert data["function"] == "collect_metrics"
        assert data["custom"] == {"alert_id": "database-errorRate-1"}

    def test_json_formatter_skips_top_level_duplicates(self):
        record = make_record(logger="perfwatch.x", level="error", timestamp="2026-01-01", alert_id="a-1")

        data = json.loads(JsonFormatter().format(record))

        assert data["custom"] == {"alert_id": "a-1"}
        assert data["level"] == "INFO"

    def test_json_formatter_exception(self):
        try:
            raise RuntimeError("pool closed")
        except RuntimeError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(record))

        assert data["exception"]["type"] == "RuntimeError"
        assert data["exception"]["message"] == "pool closed"

    def test_structured_formatter(self):
        output = StructuredFormatter(use_colors=False).format(make_record())

        parts = output.split(" | ")
        assert parts[1].strip() == "INFO"
        assert parts[3] == "collect_metrics:42"
        assert parts[4] == "Collection finished"

    def test_create_formatter(self):
        assert isinstance(create_formatter("json"), JsonFormatter)
        assert isinstance(create_formatter("structured"), StructuredFormatter)
        assert isinstance(create_formatter("simple"), logging.Formatter)

        with pytest.raises(ValueError):
            create_formatter("xml")
