"""Persistence for room pricing profiles and quota calendars.

PricingProfileStore and QuotaLedger are the only places that read or
write the pricing/quota tables. They hand immutable snapshots to the pure
rules in ``apps.rooms.domain`` and keep every write inside a transaction.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Mapping

from django.db import transaction  # type: ignore
from django.db.models import F  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.exceptions import InsufficientAvailabilityError, NotFoundError, ValidationError
from shared.domain.value_objects import DateRange

from .domain.pricing import PricingSnapshot, validate_price
from .domain.quota import QuotaSnapshot, validate_quota, validate_units
from .models import DailyQuota, DatePriceOverride, PriceRule, QuotaCalendar, RoomPricingProfile, WeekdayPrice

logger = logging.getLogger(__name__)


class PricingProfileStore:
    """Base price, weekday prices and per-date price overrides per room."""

    def get_profile(self, room_id: int, *, lock: bool = False) -> RoomPricingProfile:
        queryset = RoomPricingProfile.objects.select_related("room")
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(room_id=room_id)
        except RoomPricingProfile.DoesNotExist:
            raise NotFoundError(f"Room {room_id} has no pricing profile", field="room_id")

    def snapshot(self, room_id: int, stay: DateRange | None = None) -> PricingSnapshot:
        """Load the profile; date overrides are limited to ``stay`` when given."""
        profile = self.get_profile(room_id)
        weekday_prices = dict(profile.weekday_prices.values_list("weekday", "price"))

        overrides = profile.date_overrides.all()
        if stay is not None:
            overrides = overrides.filter(date__gte=stay.start_date, date__lt=stay.end_date)

        return PricingSnapshot(
            room_id=room_id,
            base_price=profile.base_nightly_price,
            weekday_prices=weekday_prices,
            date_overrides=dict(overrides.values_list("date", "price")),
            currency=profile.room.currency,
        )

    @transaction.atomic
    def update_profile(
        self,
        room_id: int,
        *,
        base_price: Decimal | None = None,
        weekday_prices: Mapping[int, Decimal | None] | None = None,
    ) -> PricingSnapshot:
        """Change the base price and/or weekday prices.

        A ``None`` value in ``weekday_prices`` removes that weekday's rule.
        """
        profile = self.get_profile(room_id, lock=True)

        if base_price is not None:
            profile.base_nightly_price = validate_price(base_price, "base_price")
            profile.save(update_fields=["base_nightly_price", "updated_at"])

        for weekday, price in (weekday_prices or {}).items():
            if isinstance(weekday, bool) or not isinstance(weekday, int) or weekday not in range(7):
                raise ValidationError(
                    f"Weekday must be between 0 (Sunday) and 6 (Saturday), got {weekday!r}",
                    field="weekday_prices",
                )
            if price is None:
                profile.weekday_prices.filter(weekday=weekday).delete()
                continue
            WeekdayPrice.objects.update_or_create(
                profile=profile,
                weekday=weekday,
                defaults={"price": validate_price(price, "weekday_prices")},
            )

        logger.info(f"Pricing profile of room {room_id} updated")
        return self.snapshot(room_id)

    def upsert_date_prices(self, room_id: int, days: Iterable[date], price: Decimal) -> int:
        """Write the same override price on every given date; returns rows written."""
        price = validate_price(price)
        profile = self.get_profile(room_id)
        rows = [DatePriceOverride(profile=profile, date=day, price=price) for day in days]
        if not rows:
            return 0

        with transaction.atomic():
            DatePriceOverride.objects.bulk_create(
                rows,
                update_conflicts=True,
                unique_fields=["profile", "date"],
                update_fields=["price", "updated_at"],
            )
        return len(rows)

    def set_date_price(self, room_id: int, day: date, price: Decimal) -> None:
        self.upsert_date_prices(room_id, [day], price)
        logger.info(f"Date price of room {room_id} on {day} set to {price}")

    def clear_date_price(self, room_id: int, day: date) -> bool:
        """Drop an explicit override so the date falls back to weekday/base price."""
        profile = self.get_profile(room_id)
        deleted, _ = profile.date_overrides.filter(date=day).delete()
        if deleted:
            logger.info(f"Date price of room {room_id} on {day} cleared")
        return bool(deleted)

    def active_rules(self, room_id: int, stay: DateRange) -> List[PriceRule]:
        """Active catalog rules that cover at least one night of ``stay``."""
        return list(
            PriceRule.objects.filter(
                room_id=room_id,
                is_active=True,
                start_date__lte=stay.last_night,
                end_date__gte=stay.start_date,
            ).order_by("start_date", "name")
        )


class QuotaLedger:
    """Remaining bookable units per room and night.

    ``reserve`` and ``release`` are all-or-nothing: they lock every quota row
    of the stay (ascending date order, so concurrent writers cannot
    deadlock), check, then update every row in one statement.
    """

    def get_calendar(self, room_id: int) -> QuotaCalendar:
        try:
            return QuotaCalendar.objects.get(room_id=room_id)
        except QuotaCalendar.DoesNotExist:
            raise NotFoundError(f"Room {room_id} has no quota calendar", field="room_id")

    def get(self, room_id: int, day: date) -> int:
        calendar = self.get_calendar(room_id)
        quota = calendar.daily_quotas.filter(date=day).values_list("quota", flat=True).first()
        if quota is None:
            return calendar.default_unit_count
        return quota

    def snapshot(self, room_id: int, stay: DateRange) -> QuotaSnapshot:
        calendar = self.get_calendar(room_id)
        per_date = calendar.daily_quotas.filter(
            date__gte=stay.start_date,
            date__lt=stay.end_date,
        ).values_list("date", "quota")
        return QuotaSnapshot(
            room_id=room_id,
            default_unit_count=calendar.default_unit_count,
            per_date=dict(per_date),
        )

    def reserve(self, room_id: int, check_in: date, check_out: date, units: int) -> None:
        stay = DateRange(check_in, check_out)
        validate_units(units)

        with transaction.atomic():
            calendar = self.get_calendar(room_id)
            rows = self._lock_rows(calendar, stay)

            short = [row.date for row in rows if row.quota < units]
            if short:
                logger.warning(
                    f"Reservation of {units} unit(s) for room {room_id} over {stay} rejected, "
                    f"{len(short)} night(s) short"
                )
                raise InsufficientAvailabilityError(room_id, units, short)

            DailyQuota.objects.filter(pk__in=[row.pk for row in rows]).update(
                quota=F("quota") - units,
                updated_at=timezone.now(),
            )

        logger.info(f"Reserved {units} unit(s) of room {room_id} for {stay}")

    def release(self, room_id: int, check_in: date, check_out: date, units: int) -> None:
        stay = DateRange(check_in, check_out)
        validate_units(units)

        with transaction.atomic():
            calendar = self.get_calendar(room_id)
            rows = self._lock_rows(calendar, stay)
            DailyQuota.objects.filter(pk__in=[row.pk for row in rows]).update(
                quota=F("quota") + units,
                updated_at=timezone.now(),
            )

        logger.info(f"Released {units} unit(s) of room {room_id} for {stay}")

    def set_quota(self, room_id: int, days: Iterable[date], quota: int) -> int:
        """Overwrite the quota of every given date; returns rows written."""
        quota = validate_quota(quota)
        days = sorted(set(days))
        if not days:
            return 0

        with transaction.atomic():
            calendar = self.get_calendar(room_id)
            # Serialize with in-flight reservations touching the same rows
            list(
                calendar.daily_quotas.select_for_update()
                .filter(date__in=days)
                .order_by("date")
                .values_list("pk", flat=True)
            )
            DailyQuota.objects.bulk_create(
                [DailyQuota(calendar=calendar, date=day, quota=quota) for day in days],
                update_conflicts=True,
                unique_fields=["calendar", "date"],
                update_fields=["quota", "updated_at"],
            )
        return len(days)

    def clear_quota(self, room_id: int, day: date) -> bool:
        """Remove a per-date entry so the date falls back to the default count.

        Refused while a confirmed or completed hold occupies the night: its
        row carries the units already sold.
        """
        from apps.reservations.models import ReservationHold

        with transaction.atomic():
            calendar = self.get_calendar(room_id)
            rows = calendar.daily_quotas.select_for_update().filter(date=day)
            # Lock before checking so a concurrent reserve cannot slip in between
            list(rows.values_list("pk", flat=True))

            sold = ReservationHold.objects.filter(
                room_id=room_id,
                status__in=[ReservationHold.Status.CONFIRMED, ReservationHold.Status.COMPLETED],
                check_in__lte=day,
                check_out__gt=day,
            ).exists()
            if sold:
                logger.warning(f"Quota reset of room {room_id} on {day} rejected, units already sold")
                raise ValidationError(
                    f"Quota of room {room_id} on {day} cannot be reset while booked units occupy it",
                    field="date",
                )

            deleted, _ = rows.delete()
        if deleted:
            logger.info(f"Quota of room {room_id} on {day} reset to default")
        return bool(deleted)

    def _lock_rows(self, calendar: QuotaCalendar, stay: DateRange) -> List[DailyQuota]:
        """Materialize missing nights from the default, then lock them all."""
        nights = list(stay.nights())
        existing = set(
            calendar.daily_quotas.filter(date__in=nights).values_list("date", flat=True)
        )
        missing = [
            DailyQuota(calendar=calendar, date=night, quota=calendar.default_unit_count)
            for night in nights
            if night not in existing
        ]
        if missing:
            DailyQuota.objects.bulk_create(missing, ignore_conflicts=True)

        rows = list(
            DailyQuota.objects.select_for_update()
            .filter(calendar=calendar, date__in=nights)
            .order_by("date")
        )
        if len(rows) != len(nights):
            raise NotFoundError(
                f"Quota rows missing for room {calendar.room_id} over {stay}",
                field="room_id",
            )
        return rows
