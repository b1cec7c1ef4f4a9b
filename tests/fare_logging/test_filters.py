"""Tests for logging filters."""

import logging

import pytest

from train_fare.fare_logging import DefaultCorrelationFilter, PIIFilter


@pytest.fixture
def make_record():
    """Factory for creating log records with specific messages."""

    def _make_record(msg: str) -> logging.LogRecord:
        return logging.LogRecord(
            name="test.logger",
            level=logging.INFO,
            pathname="test.py",
            lineno=10,
            msg=msg,
            args=(),
            exc_info=None,
        )

    return _make_record


class TestPIIFilter:
    """Tests for PIIFilter."""

    def test_masks_email(self, make_record):
        record = make_record("quote sent to jane.martin@example.com")
        PIIFilter().filter(record)

        assert "[EMAIL]" in record.msg
        assert "jane.martin@example.com" not in record.msg

    def test_redacts_last_name_field(self, make_record):
        record = make_record("Family group priced")
        record.last_name = "Martin"

        assert PIIFilter().filter(record) is True
        assert record.last_name == "[REDACTED]"

    def test_leaves_other_records_untouched(self, make_record):
        record = make_record("Estimated fare 112.00 for 2 passengers")
        PIIFilter().filter(record)

        assert record.msg == "Estimated fare 112.00 for 2 passengers"
        assert not hasattr(record, "last_name")


class TestDefaultCorrelationFilter:
    """Tests for DefaultCorrelationFilter."""

    def test_adds_defaults(self, make_record):
        record = make_record("message")
        DefaultCorrelationFilter().filter(record)

        assert record.correlation_id == "-"
        assert record.request_id == "-"

    def test_preserves_existing_ids(self, make_record):
        record = make_record("message")
        record.correlation_id = "corr-1"
        record.request_id = "req-1"
        DefaultCorrelationFilter().filter(record)

        assert record.correlation_id == "corr-1"
        assert record.request_id == "req-1"
