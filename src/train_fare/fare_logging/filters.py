"""Log filters for passenger PII masking and correlation ID injection."""

import logging
import re

REDACTED = "[REDACTED]"


class PIIFilter(logging.Filter):
    """Masks passenger PII before a record is emitted.

    Email addresses in the message are replaced, and any attribute listed in
    SENSITIVE_FIELDS (set through ``extra=`` or log_context) is redacted.
    """

    EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+")
    SENSITIVE_FIELDS = ("last_name", "last_names")

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str) and "@" in record.msg:
            record.msg = self.EMAIL_PATTERN.sub("[EMAIL]", record.msg)
        for field in self.SENSITIVE_FIELDS:
            if getattr(record, field, None) is not None:
                setattr(record, field, REDACTED)
        return True


class DefaultCorrelationFilter(logging.Filter):
    """Fills correlation_id and request_id with "-" when absent."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in ("correlation_id", "request_id"):
            if not hasattr(record, field):
                setattr(record, field, "-")
        return True
