from typing import Any, Protocol

import httpx
import requests
from pydantic import BaseModel, Field, field_validator

from .core.exceptions import PriceApiTimeoutError, RateUnavailableError
from .models import TripDetails


class BasicRateProvider(Protocol):
    """Source of the undiscounted per-passenger fare for a route and date."""

    async def get_basic_rate(self, details: TripDetails) -> float: ...

    def get_basic_rate_sync(self, details: TripDetails) -> float: ...


class PriceResponse(BaseModel):
    price: float | None = Field(default=None, allow_inf_nan=False)

    @field_validator("price", mode="before")
    @classmethod
    def reject_bool(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("price must be a number, not a boolean")
        return v


def parse_price(data: Any) -> float:
    """Extract a usable basic rate from a price API payload.

    A missing, null, zero or negative price means the API has no fare for the
    route; it is never replaced by a default.
    """
    if not isinstance(data, dict):
        raise RateUnavailableError("Price API returned an unexpected payload")
    try:
        price = PriceResponse.model_validate(data).price
    except ValueError as e:
        raise RateUnavailableError(
            "Price API returned a non-numeric or non-finite price",
            details={"price": data.get("price")},
        ) from e
    if not price or price < 0:
        raise RateUnavailableError("No price available", details={"price": price})
    return price


class TicketPriceClient:
    def __init__(self, base_url: str, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self) -> str:
        return f"{self.base_url}/price"

    def _params(self, details: TripDetails) -> dict[str, str]:
        return {
            "from": details.origin,
            "to": details.destination,
            "date": details.departure.isoformat(),
        }

    async def get_basic_rate(self, details: TripDetails) -> float:
        """Fetch the basic rate for a trip from the ticket price API."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self._url(), params=self._params(details))

                if response.status_code >= 400:
                    raise RateUnavailableError(
                        f"Price API error: {response.status_code}",
                        details={"status_code": response.status_code},
                    )

                data = response.json()

        except httpx.TimeoutException as e:
            raise PriceApiTimeoutError(f"Request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise RateUnavailableError(f"Network error: {e}") from e
        except ValueError as e:
            raise RateUnavailableError("Price API returned invalid JSON") from e

        return parse_price(data)

    def get_basic_rate_sync(self, details: TripDetails) -> float:
        """Blocking variant of get_basic_rate for callers without an event loop.

        Uses requests so that it can run inside a thread that already hosts a
        running loop without nesting asyncio.run().
        """
        try:
            response = requests.get(self._url(), params=self._params(details), timeout=self.timeout)

            if response.status_code >= 400:
                raise RateUnavailableError(
                    f"Price API error: {response.status_code}",
                    details={"status_code": response.status_code},
                )

            data = response.json()

        except requests.Timeout as e:
            raise PriceApiTimeoutError(f"Request timed out after {self.timeout}s") from e
        except requests.JSONDecodeError as e:
            raise RateUnavailableError("Price API returned invalid JSON") from e
        except requests.RequestException as e:
            raise RateUnavailableError(f"Network error: {e}") from e

        return parse_price(data)
