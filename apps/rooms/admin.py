"""Admin registrations for rooms, pricing and inventory."""

from __future__ import annotations

from django.contrib import admin

from .models import DailyQuota, DatePriceOverride, PriceRule, QuotaCalendar, Room, RoomPricingProfile, WeekdayPrice


class PriceRuleInline(admin.TabularInline):
    model = PriceRule
    extra = 0
    fields = ("name", "rule_type", "start_date", "end_date", "modifier_percent", "is_active")


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("name", "hotel_name", "room_type", "capacity", "room_count", "currency", "is_active")
    list_filter = ("room_type", "currency", "is_active")
    search_fields = ("name", "hotel_name")
    inlines = (PriceRuleInline,)
    readonly_fields = ("created_at", "updated_at")


class WeekdayPriceInline(admin.TabularInline):
    model = WeekdayPrice
    extra = 0
    fields = ("weekday", "price")


class DatePriceOverrideInline(admin.TabularInline):
    model = DatePriceOverride
    extra = 0
    fields = ("date", "price")
    ordering = ("date",)


@admin.register(RoomPricingProfile)
class RoomPricingProfileAdmin(admin.ModelAdmin):
    list_display = ("room", "base_nightly_price", "updated_at")
    search_fields = ("room__name", "room__hotel_name")
    inlines = (WeekdayPriceInline, DatePriceOverrideInline)


class DailyQuotaInline(admin.TabularInline):
    model = DailyQuota
    extra = 0
    fields = ("date", "quota")
    ordering = ("date",)


@admin.register(QuotaCalendar)
class QuotaCalendarAdmin(admin.ModelAdmin):
    list_display = ("room", "default_unit_count", "updated_at")
    search_fields = ("room__name", "room__hotel_name")
    inlines = (DailyQuotaInline,)


@admin.register(PriceRule)
class PriceRuleAdmin(admin.ModelAdmin):
    list_display = ("name", "room", "rule_type", "start_date", "end_date", "modifier_percent", "is_active")
    list_filter = ("rule_type", "is_active")
    search_fields = ("name", "room__name")
    date_hierarchy = "start_date"
