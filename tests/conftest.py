from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from train_fare.estimator import TrainTicketEstimator
from train_fare.fare import FareCalculator
from train_fare.models import Passenger, TripDetails, TripRequest

NOW = datetime(2025, 5, 10, 8, 0, tzinfo=UTC)
BASIC_RATE = 100.0


@pytest.fixture
def now() -> datetime:
    """Fixed instant used as the pricing clock."""
    return NOW


@pytest.fixture
def calculator() -> FareCalculator:
    return FareCalculator()


@pytest.fixture
def make_details(now: datetime) -> Callable[..., TripDetails]:
    """Factory for Bordeaux -> Paris trip details departing a given delay from now."""

    def _make_details(
        days: float = 24,
        hours: float = 0,
        origin: str = "Bordeaux",
        destination: str = "Paris",
    ) -> TripDetails:
        return TripDetails(
            origin=origin,
            destination=destination,
            departure=now + timedelta(days=days, hours=hours),
        )

    return _make_details


@pytest.fixture
def make_request(make_details) -> Callable[..., TripRequest]:
    """Factory for trip requests; extra kwargs go to make_details."""

    def _make_request(*passengers: Passenger, **details_kwargs) -> TripRequest:
        return TripRequest(passengers=passengers, details=make_details(**details_kwargs))

    return _make_request


@pytest.fixture
def mock_rate_provider() -> Mock:
    """Rate provider returning BASIC_RATE from both the async and sync paths."""
    provider = Mock()
    provider.get_basic_rate = AsyncMock(return_value=BASIC_RATE)
    provider.get_basic_rate_sync = Mock(return_value=BASIC_RATE)
    return provider


@pytest.fixture
def estimator(mock_rate_provider: Mock, now: datetime) -> TrainTicketEstimator:
    return TrainTicketEstimator(rate_provider=mock_rate_provider, clock=lambda: now)
