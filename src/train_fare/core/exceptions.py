"""Standardized exception hierarchy for fare estimation."""

from typing import Any


class FareError(Exception):
    """Base exception for all fare estimation errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TransientError(FareError):
    """Errors that may succeed if the caller tries again later."""

    pass


class RateUnavailableError(TransientError):
    """The base-rate provider could not produce a usable price."""

    pass


class PriceApiTimeoutError(RateUnavailableError):
    """Ticket price API request timed out."""

    pass


class PermanentError(FareError):
    """Errors that will not succeed on retry."""

    pass


class InvalidTripError(PermanentError):
    """Trip request rejected before a price could be computed."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None):
        super().__init__(reason, details)
        self.reason = reason
