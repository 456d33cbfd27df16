"""
Nightly Price Resolution

Pure precedence rule for a room's nightly price. Nothing here touches the
database: repositories load a PricingSnapshot and the rule runs on it.

Precedence, highest first:
1. explicit date override (never adjusted further)
2. weekday price (0=Sunday ... 6=Saturday)
3. base nightly price

Price rules (seasonal modifiers) are not applied here.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Mapping

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange, Money


class PriceSource(str, Enum):
    DATE_OVERRIDE = 'date_override'
    WEEKDAY = 'weekday'
    BASE = 'base'


def weekday_index(day: date) -> int:
    """Weekday with Sunday as 0 and Saturday as 6"""
    return day.isoweekday() % 7


def validate_price(value, field_name: str = 'price') -> Decimal:
    """Coerce to Decimal and reject negatives"""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number", field=field_name)
    try:
        price = Decimal(str(value))
    except ArithmeticError:
        raise ValidationError(f"{field_name} must be a number", field=field_name)
    if not price.is_finite():
        raise ValidationError(f"{field_name} must be a finite number", field=field_name)
    if price < 0:
        raise ValidationError(f"{field_name} cannot be negative", field=field_name)
    return price


@dataclass(frozen=True)
class NightlyPrice(ValueObject):
    """Price of one night together with the rule that produced it"""
    date: date
    amount: Decimal
    source: PriceSource


@dataclass(frozen=True)
class PricingSnapshot(ValueObject):
    """
    Read-only view of a room's pricing profile

    date_overrides may be limited to the dates a caller is interested in;
    dates missing from it simply fall through to the weekday/base rules.
    """
    room_id: int
    base_price: Decimal
    weekday_prices: Mapping[int, Decimal] = field(default_factory=dict)
    date_overrides: Mapping[date, Decimal] = field(default_factory=dict)
    currency: str = 'TRY'

    def __post_init__(self):
        validate_price(self.base_price, 'base_price')
        for weekday, price in self.weekday_prices.items():
            if weekday not in range(7):
                raise ValidationError(
                    f"Weekday must be between 0 (Sunday) and 6 (Saturday), got {weekday}",
                    field='weekday',
                )
            validate_price(price, 'weekday_price')
        for price in self.date_overrides.values():
            validate_price(price, 'price')
        object.__setattr__(self, 'weekday_prices', dict(self.weekday_prices))
        object.__setattr__(self, 'date_overrides', dict(self.date_overrides))

    def price_for(self, day: date) -> NightlyPrice:
        if day in self.date_overrides:
            return NightlyPrice(day, Decimal(self.date_overrides[day]), PriceSource.DATE_OVERRIDE)

        weekday = weekday_index(day)
        if weekday in self.weekday_prices:
            return NightlyPrice(day, Decimal(self.weekday_prices[weekday]), PriceSource.WEEKDAY)

        return NightlyPrice(day, Decimal(self.base_price), PriceSource.BASE)

    def prices_for(self, stay: DateRange) -> List[NightlyPrice]:
        return [self.price_for(night) for night in stay.nights()]


@dataclass(frozen=True)
class StayQuote(ValueObject):
    """Total price of a stay and its per-night breakdown"""
    room_id: int
    stay: DateRange
    nights: List[NightlyPrice]
    total: Money

    @classmethod
    def from_nights(cls, room_id: int, stay: DateRange, nights: List[NightlyPrice], currency: str) -> 'StayQuote':
        total = sum((night.amount for night in nights), Decimal('0'))
        return cls(room_id=room_id, stay=stay, nights=list(nights), total=Money(total, currency))

    @property
    def night_count(self) -> int:
        return len(self.nights)

    def by_source(self) -> Dict[PriceSource, int]:
        """How many nights each precedence rule priced"""
        counts: Dict[PriceSource, int] = {}
        for night in self.nights:
            counts[night.source] = counts.get(night.source, 0) + 1
        return counts
