"""Room pricing and inventory models.

A room owns exactly one pricing profile and one quota calendar. Both are
created together with the room and keep their per-date data in sparse
rows keyed by (room, date): a missing row means "fall back to the room
default", never "unknown".
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import SUPPORTED_CURRENCIES
from shared.infrastructure.config import engine_setting


def default_currency() -> str:
    return engine_setting("DEFAULT_CURRENCY")


class Room(models.Model):
    """Sellable room type of a hotel, modelled as a pool of identical units."""

    class RoomType(models.TextChoices):
        STANDARD = "standard", _("Standard")
        DELUXE = "deluxe", _("Deluxe")
        SUITE = "suite", _("Suite")
        FAMILY = "family", _("Family")

    hotel_name = models.CharField(max_length=255, blank=True)
    name = models.CharField(max_length=255)
    room_type = models.CharField(
        max_length=20,
        choices=RoomType.choices,
        default=RoomType.STANDARD,
    )
    capacity = models.PositiveSmallIntegerField(
        default=2,
        validators=[MinValueValidator(1)],
        help_text=_("Maximum number of guests per unit."),
    )
    room_count = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        help_text=_("Units of this type in the hotel; seeds the default daily inventory."),
    )
    currency = models.CharField(
        max_length=3,
        choices=[(code, code) for code in SUPPORTED_CURRENCIES],
        default=default_currency,
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["hotel_name", "name"]

    def __str__(self) -> str:
        if self.hotel_name:
            return f"{self.hotel_name} / {self.name}"
        return self.name


class RoomPricingProfile(models.Model):
    """Base nightly price of a room; weekday and date overrides hang off it."""

    room = models.OneToOneField(
        Room,
        on_delete=models.CASCADE,
        related_name="pricing_profile",
    )
    base_nightly_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Pricing profile")
        verbose_name_plural = _("Pricing profiles")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(base_nightly_price__gte=0),
                name="pricing_profile_base_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"Pricing for {self.room}"


class WeekdayPrice(models.Model):
    """Price applied to every date falling on the given weekday."""

    class Weekday(models.IntegerChoices):
        SUNDAY = 0, _("Sunday")
        MONDAY = 1, _("Monday")
        TUESDAY = 2, _("Tuesday")
        WEDNESDAY = 3, _("Wednesday")
        THURSDAY = 4, _("Thursday")
        FRIDAY = 5, _("Friday")
        SATURDAY = 6, _("Saturday")

    profile = models.ForeignKey(
        RoomPricingProfile,
        on_delete=models.CASCADE,
        related_name="weekday_prices",
    )
    weekday = models.PositiveSmallIntegerField(choices=Weekday.choices)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    class Meta:
        verbose_name = _("Weekday price")
        verbose_name_plural = _("Weekday prices")
        ordering = ["weekday"]
        constraints = [
            models.UniqueConstraint(fields=["profile", "weekday"], name="weekday_price_unique"),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="weekday_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(weekday__lte=6),
                name="weekday_price_valid_weekday",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.get_weekday_display()}: {self.price}"


class DatePriceOverride(models.Model):
    """Administrator-set price for one calendar date; highest precedence."""

    profile = models.ForeignKey(
        RoomPricingProfile,
        on_delete=models.CASCADE,
        related_name="date_overrides",
    )
    date = models.DateField()
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Date price override")
        verbose_name_plural = _("Date price overrides")
        ordering = ["date"]
        constraints = [
            models.UniqueConstraint(fields=["profile", "date"], name="date_price_override_unique"),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="date_price_override_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.date.isoformat()}: {self.price}"


class QuotaCalendar(models.Model):
    """Per-room inventory calendar; per-date rows live in DailyQuota."""

    room = models.OneToOneField(
        Room,
        on_delete=models.CASCADE,
        related_name="quota_calendar",
    )
    default_unit_count = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        help_text=_("Bookable units on any date without an explicit quota row."),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Quota calendar")
        verbose_name_plural = _("Quota calendars")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(default_unit_count__gte=1),
                name="quota_calendar_default_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"Inventory for {self.room} (default {self.default_unit_count})"


class DailyQuota(models.Model):
    """Remaining bookable units of a room on one night. 0 means stop-sell."""

    calendar = models.ForeignKey(
        QuotaCalendar,
        on_delete=models.CASCADE,
        related_name="daily_quotas",
    )
    date = models.DateField()
    quota = models.IntegerField(validators=[MinValueValidator(0)])
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Daily quota")
        verbose_name_plural = _("Daily quotas")
        ordering = ["date"]
        constraints = [
            models.UniqueConstraint(fields=["calendar", "date"], name="daily_quota_unique"),
            models.CheckConstraint(
                condition=models.Q(quota__gte=0),
                name="daily_quota_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["calendar", "date"], name="daily_quota_calendar_date_idx"),
        ]

    @property
    def is_stop_sell(self) -> bool:
        return self.quota == 0

    def __str__(self) -> str:
        return f"{self.date.isoformat()}: {self.quota}"


class PriceRule(models.Model):
    """Seasonal/weekend/holiday modifier kept as a catalog entry.

    Rules are shown next to calendar dates but never applied to the
    resolved nightly price: how they should combine with explicit date
    prices is still a product decision.
    """

    class RuleType(models.TextChoices):
        SEASONAL = "seasonal", _("Seasonal")
        WEEKEND = "weekend", _("Weekend")
        HOLIDAY = "holiday", _("Holiday")
        SPECIAL = "special", _("Special")

    room = models.ForeignKey(
        Room,
        on_delete=models.CASCADE,
        related_name="price_rules",
    )
    name = models.CharField(max_length=100)
    rule_type = models.CharField(max_length=20, choices=RuleType.choices)
    start_date = models.DateField()
    end_date = models.DateField()
    modifier_percent = models.SmallIntegerField(
        validators=[MinValueValidator(-99), MaxValueValidator(300)],
        help_text=_("Percentage change relative to the nightly price (-99..300)."),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Price rule")
        verbose_name_plural = _("Price rules")
        ordering = ["start_date", "name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="price_rule_valid_date_range",
            ),
            models.CheckConstraint(
                condition=models.Q(modifier_percent__gte=-99) & models.Q(modifier_percent__lte=300),
                name="price_rule_modifier_bounds",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "start_date", "end_date"], name="price_rule_room_dates_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.modifier_percent:+d}%)"
