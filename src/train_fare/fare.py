"""Fare engine: prices a trip request from a base rate at a given instant.

Pricing runs in three steps whose order matters:

1. trip validation (cities, departure date),
2. per-passenger pricing (age bracket, timing adjustment, family reduction),
3. group adjustment (couple / half-couple) over the summed fares.

Bracket, timing and group rules are ordered tables; the first matching row
wins. The calculator never reads the clock: callers pass ``now``.
"""

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field

from .core.exceptions import InvalidTripError
from .models import DiscountCard, Passenger, TripDetails, TripRequest

logger = logging.getLogger(__name__)

START_CITY_INVALID = "Start city is invalid"
DESTINATION_CITY_INVALID = "Destination city is invalid"
DATE_INVALID = "Date is invalid"
AGE_INVALID = "Age is invalid"
LAST_NAME_REQUIRED = "Last name is required for Family discount"

TODDLER_FARE = 9.0
TRAIN_STROKE_FARE = 1.0
SENIOR_CARD_DISCOUNT = 0.2
FAMILY_DISCOUNT = 0.3

EARLY_BOOKING_DAYS = 30
IMMINENT_DEPARTURE_HOURS = 6
EARLY_OR_IMMINENT_DISCOUNT = 0.2
SURCHARGE_MIN_DAYS = 5
SURCHARGE_PIVOT_DAYS = 20
SURCHARGE_PER_DAY = 0.02

ONE_DAY = timedelta(days=1)
ONE_HOUR = timedelta(hours=1)


class AgeBracket(str, Enum):
    INFANT = "infant"
    TODDLER = "toddler"
    MINOR = "minor"
    SENIOR = "senior"
    ADULT = "adult"


class TimingRule(str, Enum):
    TRAIN_STROKE = "train_stroke"
    EARLY_OR_IMMINENT = "early_or_imminent"
    LINEAR_SURCHARGE = "linear_surcharge"
    LAST_MINUTE = "last_minute"


class GroupDiscount(str, Enum):
    COUPLE = "couple"
    HALF_COUPLE = "half_couple"


BRACKET_MULTIPLIERS = {
    AgeBracket.MINOR: 0.6,
    AgeBracket.SENIOR: 0.8,
    AgeBracket.ADULT: 1.2,
}

GROUP_DISCOUNT_RATES = {
    GroupDiscount.COUPLE: 0.4,
    GroupDiscount.HALF_COUPLE: 0.1,
}


@dataclass(frozen=True)
class GroupProfile:
    """Group-wide flags, computed once per call."""

    size: int
    is_couple: bool
    is_half_couple: bool
    has_minor: bool
    is_family: bool
    family_last_names: frozenset[str]

    @classmethod
    def from_passengers(cls, passengers: Sequence[Passenger]) -> "GroupProfile":
        family_holders = [p for p in passengers if p.holds(DiscountCard.FAMILY)]
        return cls(
            size=len(passengers),
            is_couple=any(p.holds(DiscountCard.COUPLE) for p in passengers),
            is_half_couple=any(p.holds(DiscountCard.HALF_COUPLE) for p in passengers),
            has_minor=any(p.age < 18 for p in passengers),
            is_family=bool(family_holders),
            family_last_names=frozenset(
                p.last_name for p in family_holders if p.last_name is not None
            ),
        )


@dataclass(frozen=True)
class TimeToDeparture:
    """Whole days and hours left before departure, both rounded up."""

    days: int
    hours: int

    @classmethod
    def between(cls, now: datetime, departure: datetime) -> "TimeToDeparture":
        delta = departure - now
        return cls(days=-(-delta // ONE_DAY), hours=-(-delta // ONE_HOUR))


AgePredicate = Callable[[float], bool]
TimingPredicate = Callable[[Passenger, GroupProfile, TimeToDeparture], bool]
GroupPredicate = Callable[[GroupProfile], bool]

# Negative and non-finite ages are rejected before this table is consulted.
AGE_BRACKETS: tuple[tuple[AgePredicate, AgeBracket], ...] = (
    (lambda age: age < 1, AgeBracket.INFANT),
    (lambda age: age < 4, AgeBracket.TODDLER),
    (lambda age: age <= 17, AgeBracket.MINOR),
    (lambda age: age >= 70, AgeBracket.SENIOR),
    (lambda age: True, AgeBracket.ADULT),
)

# Not consulted for infants or toddlers.
TIMING_RULES: tuple[tuple[TimingPredicate, TimingRule], ...] = (
    (
        lambda p, group, left: p.holds(DiscountCard.TRAIN_STROKE) and not group.is_family,
        TimingRule.TRAIN_STROKE,
    ),
    (
        lambda p, group, left: left.days >= EARLY_BOOKING_DAYS
        or left.hours <= IMMINENT_DEPARTURE_HOURS,
        TimingRule.EARLY_OR_IMMINENT,
    ),
    (lambda p, group, left: left.days >= SURCHARGE_MIN_DAYS, TimingRule.LINEAR_SURCHARGE),
    (lambda p, group, left: True, TimingRule.LAST_MINUTE),
)

# Family groups never get a couple or half-couple reduction.
GROUP_DISCOUNT_RULES: tuple[tuple[GroupPredicate, GroupDiscount], ...] = (
    (
        lambda g: g.size == 2 and g.is_couple and not g.has_minor and not g.is_family,
        GroupDiscount.COUPLE,
    ),
    (
        lambda g: g.size == 1 and g.is_half_couple and not g.has_minor and not g.is_family,
        GroupDiscount.HALF_COUPLE,
    ),
)


def classify_age(age: float) -> AgeBracket:
    """Return the bracket for a non-negative age."""
    for matches, bracket in AGE_BRACKETS:
        if matches(age):
            return bracket
    raise AssertionError("AGE_BRACKETS must end with a catch-all row")


def select_timing_rule(
    passenger: Passenger, group: GroupProfile, time_left: TimeToDeparture
) -> TimingRule:
    for matches, rule in TIMING_RULES:
        if matches(passenger, group, time_left):
            return rule
    raise AssertionError("TIMING_RULES must end with a catch-all row")


def select_group_discount(group: GroupProfile) -> GroupDiscount | None:
    for matches, discount in GROUP_DISCOUNT_RULES:
        if matches(group):
            return discount
    return None


class PassengerFare(BaseModel):
    """One passenger's contribution to the total."""

    position: int = Field(ge=0)
    age: float
    bracket: AgeBracket
    timing: TimingRule | None = None
    family_discount: bool = False
    fare: float


class FareQuote(BaseModel):
    """Detailed breakdown of a priced trip request.

    Amounts are not clamped; a quote for valid input is expected to be
    non-negative but nothing here enforces it.
    """

    basic_rate: float
    passenger_fares: list[PassengerFare] = Field(default_factory=list)
    subtotal: float = 0.0
    group_discount: GroupDiscount | None = None
    group_discount_amount: float = 0.0
    total: float = 0.0


class FareCalculator:
    """Calculates train fares from a base rate, passenger ages and discount cards."""

    def calculate(self, request: TripRequest, basic_rate: float, now: datetime) -> FareQuote:
        """
        Price a trip request.

        ``now`` must be timezone-aware. An empty passenger list prices at 0
        without any validation. Otherwise the first violation found raises
        InvalidTripError and nothing is returned.
        """
        passengers = request.passengers
        if not passengers:
            return FareQuote(basic_rate=basic_rate)

        self._validate_details(request.details, now)

        group = GroupProfile.from_passengers(passengers)
        time_left = TimeToDeparture.between(now, request.details.departure)

        passenger_fares = [
            self._price_passenger(position, passenger, basic_rate, group, time_left)
            for position, passenger in enumerate(passengers)
        ]
        subtotal = sum(pf.fare for pf in passenger_fares)

        group_discount = select_group_discount(group)
        group_discount_amount = (
            basic_rate * GROUP_DISCOUNT_RATES[group_discount] if group_discount else 0.0
        )

        logger.debug(
            f"Priced {len(passenger_fares)} passengers: subtotal={subtotal:.2f}, "
            f"group_discount={group_discount_amount:.2f}, "
            f"days_left={time_left.days}, hours_left={time_left.hours}"
        )

        return FareQuote(
            basic_rate=basic_rate,
            passenger_fares=passenger_fares,
            subtotal=subtotal,
            group_discount=group_discount,
            group_discount_amount=group_discount_amount,
            total=subtotal - group_discount_amount,
        )

    @staticmethod
    def _validate_details(details: TripDetails, now: datetime) -> None:
        if not details.origin.strip():
            raise InvalidTripError(START_CITY_INVALID, details={"origin": details.origin})
        if not details.destination.strip():
            raise InvalidTripError(
                DESTINATION_CITY_INVALID, details={"destination": details.destination}
            )
        if details.departure < now:
            raise InvalidTripError(
                DATE_INVALID,
                details={"departure": details.departure.isoformat(), "now": now.isoformat()},
            )

    def _price_passenger(
        self,
        position: int,
        passenger: Passenger,
        basic_rate: float,
        group: GroupProfile,
        time_left: TimeToDeparture,
    ) -> PassengerFare:
        if not math.isfinite(passenger.age) or passenger.age < 0:
            raise InvalidTripError(AGE_INVALID, details={"position": position})

        bracket = classify_age(passenger.age)
        if bracket is AgeBracket.INFANT:
            return PassengerFare(position=position, age=passenger.age, bracket=bracket, fare=0.0)

        rate = self._bracket_rate(bracket, passenger, basic_rate, group)

        timing = None
        if bracket is not AgeBracket.TODDLER:
            timing = select_timing_rule(passenger, group, time_left)
            rate = self._apply_timing(timing, rate, basic_rate, time_left)

        family_discount = False
        if group.is_family:
            if passenger.last_name is None:
                raise InvalidTripError(LAST_NAME_REQUIRED, details={"position": position})
            family_discount = passenger.last_name in group.family_last_names
            if family_discount:
                rate -= basic_rate * FAMILY_DISCOUNT

        return PassengerFare(
            position=position,
            age=passenger.age,
            bracket=bracket,
            timing=timing,
            family_discount=family_discount,
            fare=rate,
        )

    @staticmethod
    def _bracket_rate(
        bracket: AgeBracket, passenger: Passenger, basic_rate: float, group: GroupProfile
    ) -> float:
        if bracket is AgeBracket.TODDLER:
            return TODDLER_FARE

        rate = basic_rate * BRACKET_MULTIPLIERS[bracket]
        if (
            bracket is AgeBracket.SENIOR
            and passenger.holds(DiscountCard.SENIOR)
            and not group.is_family
        ):
            rate -= basic_rate * SENIOR_CARD_DISCOUNT
        return rate

    @staticmethod
    def _apply_timing(
        rule: TimingRule, rate: float, basic_rate: float, time_left: TimeToDeparture
    ) -> float:
        if rule is TimingRule.TRAIN_STROKE:
            return TRAIN_STROKE_FARE
        if rule is TimingRule.EARLY_OR_IMMINENT:
            return rate - basic_rate * EARLY_OR_IMMINENT_DISCOUNT
        if rule is TimingRule.LINEAR_SURCHARGE:
            return rate + (SURCHARGE_PIVOT_DAYS - time_left.days) * SURCHARGE_PER_DAY * basic_rate
        return rate + basic_rate
