"""Trip request models consumed by the fare engine.

Models only check types. Business validity (blank cities, past departures,
negative ages, missing surnames) is the engine's job because it has to be
reported in a fixed order and skipped entirely for empty requests.
"""

from enum import Enum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class DiscountCard(str, Enum):
    SENIOR = "senior"
    COUPLE = "couple"
    HALF_COUPLE = "half_couple"
    TRAIN_STROKE = "train_stroke"
    FAMILY = "family"


class Passenger(BaseModel):
    """A traveller, compared by value."""

    model_config = ConfigDict(frozen=True)

    age: float
    discounts: frozenset[DiscountCard] = Field(default_factory=frozenset)
    last_name: str | None = None

    def holds(self, card: DiscountCard) -> bool:
        return card in self.discounts


class TripDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: str
    destination: str
    departure: AwareDatetime


class TripRequest(BaseModel):
    """Passengers plus trip details: the unit of one pricing call."""

    model_config = ConfigDict(frozen=True)

    passengers: tuple[Passenger, ...] = ()
    details: TripDetails
