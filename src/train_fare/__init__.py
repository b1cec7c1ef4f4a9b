"""Train fare estimation: age brackets, booking-time pricing and discount cards."""

from .core.exceptions import (
    FareError,
    InvalidTripError,
    PriceApiTimeoutError,
    RateUnavailableError,
)
from .estimator import TrainTicketEstimator, build_estimator
from .fare import FareCalculator, FareQuote, PassengerFare
from .models import DiscountCard, Passenger, TripDetails, TripRequest
from .price_api import BasicRateProvider, TicketPriceClient

__all__ = [
    "TrainTicketEstimator",
    "build_estimator",
    "FareCalculator",
    "FareQuote",
    "PassengerFare",
    "DiscountCard",
    "Passenger",
    "TripDetails",
    "TripRequest",
    "BasicRateProvider",
    "TicketPriceClient",
    "FareError",
    "InvalidTripError",
    "RateUnavailableError",
    "PriceApiTimeoutError",
]
