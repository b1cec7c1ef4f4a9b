"""Tests for logging formatters."""

import json
import logging
import sys

import pytest

from train_fare.fare_logging import DevFormatter, JSONFormatter


@pytest.fixture
def log_record():
    """Create a basic log record."""
    return logging.LogRecord(
        name="train_fare.estimator",
        level=logging.INFO,
        pathname="estimator.py",
        lineno=10,
        msg="Estimated fare %.2f",
        args=(112.0,),
        exc_info=None,
    )


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_json_formatter_basic_output(self, log_record):
        """Verify JSON format with timestamp, level, logger, message."""
        data = json.loads(JSONFormatter().format(log_record))

        assert "timestamp" in data
        assert data["level"] == "INFO"
        assert data["logger"] == "train_fare.estimator"
        assert data["message"] == "Estimated fare 112.00"
        assert data["env"] == "development"

    def test_json_formatter_includes_request_fields(self, log_record):
        """Verify request fields set through extra= or log_context are emitted."""
        log_record.request_id = "req-123"
        log_record.origin = "Bordeaux"
        log_record.destination = "Paris"
        log_record.passenger_count = 2

        data = json.loads(JSONFormatter("production").format(log_record))

        assert data["request_id"] == "req-123"
        assert data["origin"] == "Bordeaux"
        assert data["destination"] == "Paris"
        assert data["passenger_count"] == 2
        assert data["env"] == "production"
        assert "correlation_id" not in data

    def test_json_formatter_includes_exception(self, log_record):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            log_record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(log_record))

        assert "RuntimeError: boom" in data["exception"]


class TestDevFormatter:
    """Tests for DevFormatter."""

    def test_dev_formatter_output(self, log_record):
        """Verify human-readable format."""
        output = DevFormatter().format(log_record)

        assert "INFO" in output
        assert "train_fare.estimator" in output
        assert "Estimated fare 112.00" in output

    def test_dev_formatter_tags_request_id(self, log_record):
        log_record.request_id = "req-9"

        assert "[req-9]" in DevFormatter().format(log_record)

    def test_dev_formatter_without_request_id(self, log_record):
        assert "[-]" in DevFormatter().format(log_record)
