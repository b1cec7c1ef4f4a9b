import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import UTC, datetime
from uuid import uuid4

from .core.exceptions import InvalidTripError, RateUnavailableError
from .fare import FareCalculator, FareQuote
from .fare_logging import log_request_context, setup_logging
from .models import TripRequest
from .price_api import BasicRateProvider, TicketPriceClient
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class TrainTicketEstimator:
    """Entry point for pricing a trip request.

    Each call fetches the basic rate once, reads the clock once, and hands
    both to the FareCalculator. Errors from either step propagate unchanged.
    """

    def __init__(
        self,
        rate_provider: BasicRateProvider,
        calculator: FareCalculator | None = None,
        clock: Clock = utc_now,
    ):
        self.rate_provider = rate_provider
        self.calculator = calculator or FareCalculator()
        self.clock = clock

    async def quote(self, request: TripRequest) -> FareQuote:
        with self._context(request):
            try:
                basic_rate = await self.rate_provider.get_basic_rate(request.details)
            except RateUnavailableError as e:
                logger.warning(f"Basic rate unavailable: {e.message}")
                raise
            return self._price(request, basic_rate)

    async def estimate(self, request: TripRequest) -> float:
        """Return the total fare for a trip request."""
        quote = await self.quote(request)
        return quote.total

    def quote_sync(self, request: TripRequest) -> FareQuote:
        with self._context(request):
            try:
                basic_rate = self.rate_provider.get_basic_rate_sync(request.details)
            except RateUnavailableError as e:
                logger.warning(f"Basic rate unavailable: {e.message}")
                raise
            return self._price(request, basic_rate)

    def estimate_sync(self, request: TripRequest) -> float:
        """Blocking variant of estimate."""
        return self.quote_sync(request).total

    def _context(self, request: TripRequest) -> AbstractContextManager[None]:
        return log_request_context(
            str(uuid4()),
            origin=request.details.origin,
            destination=request.details.destination,
            passenger_count=len(request.passengers),
        )

    def _price(self, request: TripRequest, basic_rate: float) -> FareQuote:
        now = self.clock()
        try:
            quote = self.calculator.calculate(request, basic_rate, now)
        except InvalidTripError as e:
            logger.warning(f"Trip rejected: {e.reason}")
            raise

        logger.info(f"Estimated fare {quote.total:.2f} from basic rate {basic_rate:.2f}")
        return quote


def configure_logging(settings: Settings) -> None:
    """Apply the FARE_ logging settings to the root logger."""
    setup_logging(
        level=settings.fare.log_level,
        json_output=settings.fare.log_format == "json",
        environment=settings.fare.environment,
    )


def build_estimator(settings: Settings | None = None) -> TrainTicketEstimator:
    """Configure logging and create an estimator backed by the ticket price API."""
    if settings is None:
        settings = get_settings()
    configure_logging(settings)
    client = TicketPriceClient(
        base_url=settings.price_api.base_url,
        timeout=settings.price_api.timeout,
    )
    return TrainTicketEstimator(rate_provider=client)
