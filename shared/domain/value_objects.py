"""
Common Value Objects

Value objects used by both the room calendar and reservation contexts:
- Money: monetary amount with currency
- DateRange: half-open range of nights [start_date, end_date)
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterator

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError

SUPPORTED_CURRENCIES = ('TRY', 'USD', 'EUR', 'GBP')

CENT = Decimal('0.01')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Amounts are non-negative and kept at two decimal places.
    """
    amount: Decimal
    currency: str = 'TRY'

    def __post_init__(self):
        amount = Decimal(str(self.amount)).quantize(CENT, rounding=ROUND_HALF_UP)
        if amount < 0:
            raise ValidationError("Amount cannot be negative", field='amount')
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValidationError(f"Unsupported currency: {self.currency}", field='currency')
        object.__setattr__(self, 'amount', amount)

    @classmethod
    def zero(cls, currency: str = 'TRY') -> 'Money':
        return cls(Decimal('0'), currency)

    def __add__(self, other: 'Money') -> 'Money':
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> 'Money':
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by an integer or Decimal")
        return Money(self.amount * factor, self.currency)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Stay range value object

    start_date is inclusive, end_date is exclusive, so a guest checking out
    on day N does not occupy night N. At least one night is required.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValidationError(
                f"Check-out ({self.end_date}) must be after check-in ({self.start_date})",
                field='check_out',
            )

    @classmethod
    def inclusive(cls, first: date, last: date) -> 'DateRange':
        """
        Range covering every date from first to last, both included

        Reversed bounds are swapped.
        """
        if last < first:
            first, last = last, first
        return cls(first, last + timedelta(days=1))

    def nights(self) -> Iterator[date]:
        """Yield each occupied night in ascending order"""
        current = self.start_date
        while current < self.end_date:
            yield current
            current += timedelta(days=1)

    def overlaps_with(self, other: 'DateRange') -> bool:
        """Adjacent ranges (one ends where the other starts) do not overlap"""
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return (self.start_date < other.end_date and
                self.end_date > other.start_date)

    def contains(self, check_date: date) -> bool:
        return self.start_date <= check_date < self.end_date

    @property
    def last_night(self) -> date:
        return self.end_date - timedelta(days=1)

    def __len__(self) -> int:
        """Number of nights"""
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
