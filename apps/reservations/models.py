"""Reservation hold persistence."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.rooms.models import Room
from shared.domain.value_objects import SUPPORTED_CURRENCIES


class ReservationHold(models.Model):
    """A guest's claim on ``units_requested`` units of a room for a stay."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    hold_code = models.CharField(max_length=8, unique=True, editable=False)
    room = models.ForeignKey(
        Room,
        on_delete=models.PROTECT,
        related_name="holds",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="reservation_holds",
        null=True,
        blank=True,
    )
    check_in = models.DateField()
    check_out = models.DateField()
    units_requested = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )

    quoted_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    currency = models.CharField(
        max_length=3,
        choices=[(code, code) for code in SUPPORTED_CURRENCIES],
        default="TRY",
    )

    guest_name = models.CharField(max_length=255, blank=True)
    guest_email = models.EmailField(blank=True)

    expires_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reservation hold")
        verbose_name_plural = _("Reservation holds")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="reservation_hold_valid_stay",
            ),
            models.CheckConstraint(
                condition=models.Q(units_requested__gte=1),
                name="reservation_hold_units_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "expires_at"], name="hold_status_expiry_idx"),
            models.Index(fields=["room", "check_in", "check_out"], name="hold_room_stay_idx"),
        ]

    def __str__(self) -> str:
        return f"Hold {self.hold_code} ({self.get_status_display()})"

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days
