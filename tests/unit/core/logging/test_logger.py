"""
Tests for ApiManagerLogger.
"""

import json
import logging
import uuid

import pytest

from api_manager.core.logging.config import LoggingConfig, LogLevel, LogFormat
from api_manager.core.logging.filters import (
    CorrelationIdFilter,
    get_request_id,
    reset_request_id,
    set_request_id,
)
from api_manager.core.logging.formatters import JSONFormatter, TextFormatter, get_formatter
from api_manager.core.logging.logger import ApiManagerLogger


def unique_name():
    return f"api_manager.test.{uuid.uuid4().hex[:8]}"


def make_record(msg="Test message", **extra):
    record = logging.LogRecord(
        name="test",
        level=logging.DEBUG,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_defaults(self):
        config = LoggingConfig()
        assert config.level == LogLevel.DEBUG
        assert config.format == LogFormat.TEXT
        assert config.enable_console is True

    def test_create_from_strings(self):
        config = LoggingConfig.create(level="info", format="JSON")
        assert config.level == LogLevel.INFO
        assert config.format == LogFormat.JSON

    def test_file_requires_path(self):
        with pytest.raises(ValueError, match="file_path"):
            LoggingConfig(enable_file=True)

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            LoggingConfig.create(level="LOUD")


class TestFormatters:
    """JSONFormatter и TextFormatter."""

    def test_json_includes_extra(self):
        output = JSONFormatter().format(make_record("Request finished", method="GET", status=200))
        data = json.loads(output)

        assert data["message"] == "Request finished"
        assert data["level"] == "DEBUG"
        assert data["method"] == "GET"
        assert data["status"] == 200
        assert "timestamp" in data

    def test_json_non_serializable_values(self):
        output = JSONFormatter().format(make_record(body=b"\x00", level_enum=LogLevel.INFO))
        data = json.loads(output)
        assert "body" in data

    def test_text_appends_fields(self):
        output = TextFormatter().format(make_record("Request finished", status=404))
        assert "[DEBUG]" in output
        assert output.endswith("Request finished status=404")

    def test_get_formatter(self):
        assert isinstance(get_formatter("json"), JSONFormatter)
        assert isinstance(get_formatter("TEXT"), TextFormatter)
        with pytest.raises(ValueError):
            get_formatter("xml")


class TestCorrelationId:
    """request_id в ContextVar."""

    def test_set_and_reset(self):
        token = set_request_id("abc")
        assert get_request_id() == "abc"
        reset_request_id(token)
        assert get_request_id() is None

    def test_filter_adds_request_id(self):
        record = make_record()
        token = set_request_id("req-1")
        try:
            assert CorrelationIdFilter().filter(record) is True
        finally:
            reset_request_id(token)
        assert record.request_id == "req-1"

    def test_filter_without_id(self):
        record = make_record()
        CorrelationIdFilter().filter(record)
        assert not hasattr(record, "request_id")


class TestApiManagerLogger:
    """Tests for ApiManagerLogger class."""

    def test_without_config_adds_no_handlers(self):
        name = unique_name()
        logger = ApiManagerLogger(name=name)

        assert logging.getLogger(name).handlers == []
        assert logging.getLogger(name).propagate is True
        logger.close()

    def test_with_config_owns_handlers(self, logging_config):
        name = unique_name()
        logger = ApiManagerLogger(logging_config, name=name)
        python_logger = logging.getLogger(name)

        assert len(python_logger.handlers) == 1
        assert python_logger.propagate is False
        assert python_logger.level == logging.DEBUG

        logger.close()
        assert python_logger.handlers == []

    def test_shared_name_keeps_other_handlers(self, logging_config):
        """Второй логгер с тем же именем не трогает обработчики первого."""
        name = unique_name()
        first = ApiManagerLogger(logging_config, name=name)
        first_handlers = list(logging.getLogger(name).handlers)
        second = ApiManagerLogger(logging_config, name=name)
        python_logger = logging.getLogger(name)

        assert all(handler in python_logger.handlers for handler in first_handlers)
        assert len(python_logger.handlers) == 2

        second.close()
        assert python_logger.handlers == first_handlers

        first.close()
        assert python_logger.handlers == []

    def test_masks_sensitive_fields(self, caplog):
        name = unique_name()
        logger = ApiManagerLogger(name=name)

        with caplog.at_level(logging.DEBUG, logger=name):
            logger.debug(
                "Request finished",
                headers={"Authorization": "Bearer abc", "Accept": "*/*"},
                url="https://api.example.com/v1?token=abc&page=1",
            )

        record = caplog.records[-1]
        assert record.headers == {"Authorization": "***REDACTED***", "Accept": "*/*"}
        assert record.url == "https://api.example.com/v1?token=***REDACTED***&page=1"

    def test_file_output_json(self, logging_config_with_file):
        name = unique_name()
        with ApiManagerLogger(logging_config_with_file, name=name) as logger:
            token = set_request_id("req-42")
            try:
                logger.debug("Request finished", status=200)
            finally:
                reset_request_id(token)

        with open(logging_config_with_file.file_path, encoding="utf-8") as f:
            data = json.loads(f.readline())

        assert data["message"] == "Request finished"
        assert data["status"] == 200
        assert data["request_id"] == "req-42"

    def test_close_is_idempotent(self, caplog):
        name = unique_name()
        logger = ApiManagerLogger(name=name)
        logger.close()
        logger.close()

        with caplog.at_level(logging.DEBUG, logger=name):
            logger.debug("after close")

        assert caplog.records == []
