"""Core utilities for the fare engine."""

from .exceptions import (
    FareError,
    InvalidTripError,
    PermanentError,
    PriceApiTimeoutError,
    RateUnavailableError,
    TransientError,
)

__all__ = [
    "FareError",
    "TransientError",
    "RateUnavailableError",
    "PriceApiTimeoutError",
    "PermanentError",
    "InvalidTripError",
]
