"""Maps ReservationHold aggregates to and from their Django rows."""

from __future__ import annotations

import secrets
from datetime import datetime
from typing import List

from django.utils import timezone  # type: ignore

from shared.domain.exceptions import NotFoundError
from shared.domain.value_objects import DateRange, Money

from .domain.entities import HoldStatus, ReservationHold
from .models import ReservationHold as ReservationHoldModel

HOLD_CODE_BYTES = 4


class ReservationHoldRepository:
    def get_by_id(self, hold_id: int, *, lock: bool = False) -> ReservationHold:
        """Load a hold; ``lock`` takes a row lock for the rest of the transaction."""
        queryset = ReservationHoldModel.objects.all()
        if lock:
            queryset = queryset.select_for_update()
        try:
            row = queryset.get(pk=hold_id)
        except ReservationHoldModel.DoesNotExist:
            raise NotFoundError(f"Reservation hold {hold_id} not found", field="hold_id")
        return self._to_entity(row)

    def expired_pending_ids(self, now: datetime) -> List[int]:
        return list(
            ReservationHoldModel.objects.filter(
                status=ReservationHoldModel.Status.PENDING,
                expires_at__lte=now,
            )
            .order_by("expires_at")
            .values_list("pk", flat=True)
        )

    def add(self, hold: ReservationHold, *, created_by=None) -> ReservationHold:
        """Insert a new hold and give it an id and a hold code."""
        hold.hold_code = hold.hold_code or self._next_hold_code()
        row = ReservationHoldModel(created_by=created_by, **self._to_fields(hold))
        row.save()
        hold.id = row.pk
        return hold

    def save(self, hold: ReservationHold) -> None:
        fields = self._to_fields(hold)
        fields["updated_at"] = timezone.now()
        ReservationHoldModel.objects.filter(pk=hold.id).update(**fields)

    def _next_hold_code(self) -> str:
        while True:
            code = secrets.token_hex(HOLD_CODE_BYTES).upper()
            if not ReservationHoldModel.objects.filter(hold_code=code).exists():
                return code

    @staticmethod
    def _to_fields(hold: ReservationHold) -> dict:
        fields = {
            "hold_code": hold.hold_code,
            "room_id": hold.room_id,
            "check_in": hold.check_in,
            "check_out": hold.check_out,
            "units_requested": hold.units_requested,
            "status": hold.status.value,
            "guest_name": hold.guest_name,
            "guest_email": hold.guest_email,
            "expires_at": hold.expires_at,
            "confirmed_at": hold.confirmed_at,
            "cancelled_at": hold.cancelled_at,
            "completed_at": hold.completed_at,
            "cancellation_reason": hold.cancellation_reason,
        }
        if hold.quoted_total is not None:
            fields["quoted_total"] = hold.quoted_total.amount
            fields["currency"] = hold.quoted_total.currency
        return fields

    @staticmethod
    def _to_entity(row: ReservationHoldModel) -> ReservationHold:
        return ReservationHold(
            id=row.pk,
            room_id=row.room_id,
            stay=DateRange(row.check_in, row.check_out),
            units_requested=row.units_requested,
            status=HoldStatus(row.status),
            hold_code=row.hold_code,
            quoted_total=Money(row.quoted_total, row.currency),
            guest_name=row.guest_name,
            guest_email=row.guest_email,
            expires_at=row.expires_at,
            confirmed_at=row.confirmed_at,
            cancelled_at=row.cancelled_at,
            completed_at=row.completed_at,
            cancellation_reason=row.cancellation_reason,
        )
