"""Admin registrations for reservation holds."""

from __future__ import annotations

from django.contrib import admin

from .models import ReservationHold


@admin.register(ReservationHold)
class ReservationHoldAdmin(admin.ModelAdmin):
    list_display = (
        "hold_code",
        "room",
        "check_in",
        "check_out",
        "units_requested",
        "status",
        "quoted_total",
        "currency",
        "expires_at",
    )
    list_filter = ("status", "currency")
    search_fields = ("hold_code", "guest_name", "guest_email", "room__name")
    date_hierarchy = "check_in"
    # Stay and status changes go through the booking engine so the quota ledger stays in step
    readonly_fields = (
        "hold_code",
        "room",
        "check_in",
        "check_out",
        "units_requested",
        "status",
        "quoted_total",
        "currency",
        "confirmed_at",
        "cancelled_at",
        "completed_at",
        "cancellation_reason",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):  # type: ignore
        return False
