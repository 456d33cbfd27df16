"""Pricing and availability services built on the room repositories."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

from django.db import transaction  # type: ignore

from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange
from shared.infrastructure.config import engine_setting

from .domain.pricing import NightlyPrice, PriceSource, StayQuote, validate_price
from .domain.quota import validate_quota, validate_units
from .repositories import PricingProfileStore, QuotaLedger

logger = logging.getLogger(__name__)


def _stay(check_in: date, check_out: date) -> DateRange:
    stay = DateRange(check_in, check_out)
    max_nights = engine_setting("MAX_STAY_NIGHTS")
    if len(stay) > max_nights:
        raise ValidationError(
            f"Stay cannot be longer than {max_nights} nights",
            field="check_out",
        )
    return stay


class PriceResolver:
    """Nightly price lookup: date override, then weekday price, then base price."""

    def __init__(self, store: PricingProfileStore | None = None) -> None:
        self.store = store or PricingProfileStore()

    def resolve(self, room_id: int, day: date) -> Decimal:
        return self.resolve_night(room_id, day).amount

    def resolve_night(self, room_id: int, day: date) -> NightlyPrice:
        snapshot = self.store.snapshot(room_id, DateRange.inclusive(day, day))
        night = snapshot.price_for(day)
        logger.debug(f"Resolved price of room {room_id} on {day}: {night.amount} ({night.source.value})")
        return night

    def resolve_range(self, room_id: int, stay: DateRange) -> List[NightlyPrice]:
        return self.store.snapshot(room_id, stay).prices_for(stay)


class StayPriceCalculator:
    def __init__(self, store: PricingProfileStore | None = None) -> None:
        self.store = store or PricingProfileStore()

    def compute_total(self, room_id: int, check_in: date, check_out: date) -> StayQuote:
        """Sum of the resolved nightly prices over [check_in, check_out)."""
        stay = _stay(check_in, check_out)
        snapshot = self.store.snapshot(room_id, stay)
        quote = StayQuote.from_nights(room_id, stay, snapshot.prices_for(stay), snapshot.currency)
        logger.debug(f"Quoted room {room_id} for {stay}: {quote.total}")
        return quote


class AvailabilityChecker:
    def __init__(self, ledger: QuotaLedger | None = None) -> None:
        self.ledger = ledger or QuotaLedger()

    def unavailable_nights(self, room_id: int, check_in: date, check_out: date, units: int = 1) -> List[date]:
        """Nights of the stay whose remaining quota is below ``units``."""
        stay = _stay(check_in, check_out)
        validate_units(units)
        return self.ledger.snapshot(room_id, stay).shortfalls(stay, units)

    def is_available(self, room_id: int, check_in: date, check_out: date, units: int = 1) -> bool:
        available = not self.unavailable_nights(room_id, check_in, check_out, units)
        logger.debug(
            f"Availability of room {room_id} for {check_in}..{check_out} x{units}: {available}"
        )
        return available


@dataclass(frozen=True)
class BulkEditResult:
    """Outcome of a bulk calendar edit; ``end`` is the last edited date."""

    room_id: int
    start: date
    end: date
    days: int
    price: Optional[Decimal] = None
    quota: Optional[int] = None


class BulkRangeEditor:
    """Applies one price and/or quota to every date of an inclusive range."""

    def __init__(
        self,
        store: PricingProfileStore | None = None,
        ledger: QuotaLedger | None = None,
    ) -> None:
        self.store = store or PricingProfileStore()
        self.ledger = ledger or QuotaLedger()

    def apply_range(
        self,
        room_id: int,
        date_from: date,
        date_to: date,
        price: Decimal | None = None,
        quota: int | None = None,
    ) -> BulkEditResult:
        if price is None and quota is None:
            raise ValidationError("Provide a price, a quota or both", field="price")
        if price is not None:
            price = validate_price(price, "price")
        if quota is not None:
            quota = validate_quota(quota, "quota")

        dates = DateRange.inclusive(date_from, date_to)
        max_days = engine_setting("MAX_BULK_RANGE_DAYS")
        if len(dates) > max_days:
            raise ValidationError(
                f"Bulk edits are limited to {max_days} days",
                field="date_to",
            )
        days = list(dates.nights())

        with transaction.atomic():
            if price is not None:
                self.store.upsert_date_prices(room_id, days, price)
            if quota is not None:
                self.ledger.set_quota(room_id, days, quota)

        result = BulkEditResult(
            room_id=room_id,
            start=days[0],
            end=days[-1],
            days=len(days),
            price=price,
            quota=quota,
        )
        logger.info(
            f"Bulk edit of room {room_id} {result.start}..{result.end}: "
            f"price={price} quota={quota}"
        )
        return result


@dataclass(frozen=True)
class CalendarDay:
    date: date
    price: Decimal
    price_source: PriceSource
    quota: int
    stop_sell: bool
    rules: List[str] = field(default_factory=list)


class CalendarReader:
    """Admin calendar view: price, quota and active rule names per date."""

    def __init__(
        self,
        store: PricingProfileStore | None = None,
        ledger: QuotaLedger | None = None,
    ) -> None:
        self.store = store or PricingProfileStore()
        self.ledger = ledger or QuotaLedger()

    def month(self, room_id: int, start: date, end: date) -> List[CalendarDay]:
        """Days from ``start`` to ``end``, both included."""
        dates = DateRange.inclusive(start, end)
        max_days = engine_setting("MAX_BULK_RANGE_DAYS")
        if len(dates) > max_days:
            raise ValidationError(f"Calendar ranges are limited to {max_days} days", field="end")

        pricing = self.store.snapshot(room_id, dates)
        quotas = self.ledger.snapshot(room_id, dates)
        rules = self.store.active_rules(room_id, dates)

        days = []
        for night in pricing.prices_for(dates):
            days.append(
                CalendarDay(
                    date=night.date,
                    price=night.amount,
                    price_source=night.source,
                    quota=quotas.quota_for(night.date),
                    stop_sell=quotas.is_stop_sell(night.date),
                    rules=[
                        rule.name
                        for rule in rules
                        if rule.start_date <= night.date <= rule.end_date
                    ],
                )
            )
        return days
