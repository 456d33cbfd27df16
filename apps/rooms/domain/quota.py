"""
Quota Calendar Rules

Pure availability arithmetic over a room's sparse per-date quota map.
A date without an entry falls back to the default unit count; an entry
of 0 is an explicit stop-sell.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Mapping

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange


def validate_units(units, field_name: str = 'units') -> int:
    """Requested units must be a positive integer"""
    if isinstance(units, bool) or not isinstance(units, int):
        raise ValidationError(f"{field_name} must be an integer", field=field_name)
    if units < 1:
        raise ValidationError(f"{field_name} must be at least 1", field=field_name)
    return units


def validate_quota(quota, field_name: str = 'quota') -> int:
    """Stored quota must be a non-negative integer (0 = stop-sell)"""
    if isinstance(quota, bool) or not isinstance(quota, int):
        raise ValidationError(f"{field_name} must be an integer", field=field_name)
    if quota < 0:
        raise ValidationError(f"{field_name} cannot be negative", field=field_name)
    return quota


@dataclass(frozen=True)
class QuotaSnapshot(ValueObject):
    """Read-only view of a room's quota calendar for some dates"""
    room_id: int
    default_unit_count: int
    per_date: Mapping[date, int] = field(default_factory=dict)

    def __post_init__(self):
        if self.default_unit_count < 1:
            raise ValidationError("Default unit count must be at least 1", field='default_unit_count')
        for quota in self.per_date.values():
            validate_quota(quota)
        object.__setattr__(self, 'per_date', dict(self.per_date))

    def quota_for(self, day: date) -> int:
        return self.per_date.get(day, self.default_unit_count)

    def is_stop_sell(self, day: date) -> bool:
        return self.per_date.get(day) == 0

    def shortfalls(self, stay: DateRange, units: int) -> List[date]:
        """Nights of the stay that cannot supply the requested units"""
        return [night for night in stay.nights() if self.quota_for(night) < units]

    def can_supply(self, stay: DateRange, units: int) -> bool:
        return not self.shortfalls(stay, units)
