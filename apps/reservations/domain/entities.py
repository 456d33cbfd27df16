"""
Reservation Domain Entities

- ReservationHold: aggregate root of a guest's claim on a stay
- HoldStatus: states of the hold lifecycle
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from shared.domain.base import Aggregate
from shared.domain.exceptions import InvalidTransitionError, ValidationError
from shared.domain.value_objects import DateRange, Money


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HoldStatus(Enum):
    """
    Reservation hold state machine

    State transitions:
    - PENDING -> CONFIRMED (inventory reserved for every night)
    - PENDING -> CANCELLED (guest, administrator or expiry; no inventory effect)
    - CONFIRMED -> CANCELLED (inventory released)
    - CONFIRMED -> COMPLETED (stay finished; no inventory effect)
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'


EXPIRED_REASON = 'expired'


@dataclass(eq=False)
class ReservationHold(Aggregate):
    """
    Reservation Hold Aggregate Root

    Key invariants:
    - stay is a non-empty half-open range [check_in, check_out)
    - at least one unit is requested
    - only a CONFIRMED hold has consumed inventory
    """

    room_id: int
    stay: DateRange
    units_requested: int = 1
    status: HoldStatus = HoldStatus.PENDING

    hold_code: str = ''
    quoted_total: Money | None = None
    guest_name: str = ''
    guest_email: str = ''

    expires_at: datetime | None = None
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    completed_at: datetime | None = None
    cancellation_reason: str = ''

    def __post_init__(self):
        if isinstance(self.units_requested, bool) or not isinstance(self.units_requested, int):
            raise ValidationError("Units must be an integer", field='units')
        if self.units_requested < 1:
            raise ValidationError("At least one unit must be requested", field='units')

    @property
    def check_in(self):
        return self.stay.start_date

    @property
    def check_out(self):
        return self.stay.end_date

    @property
    def holds_inventory(self) -> bool:
        return self.status == HoldStatus.CONFIRMED

    def is_expired(self, now: datetime | None = None) -> bool:
        """A pending hold whose payment window has closed"""
        if self.status != HoldStatus.PENDING or self.expires_at is None:
            return False
        return (now or utcnow()) >= self.expires_at

    def ensure_can_confirm(self, now: datetime | None = None):
        if self.status != HoldStatus.PENDING:
            raise InvalidTransitionError(
                f"Cannot confirm hold {self.hold_code or self.id} from status {self.status.value}",
                field='status',
            )
        if self.is_expired(now):
            raise InvalidTransitionError(
                f"Hold {self.hold_code or self.id} expired at {self.expires_at.isoformat()}",
                field='expires_at',
            )

    def confirm(self, now: datetime | None = None):
        """
        Confirm hold (PENDING -> CONFIRMED)

        The caller reserves inventory in the same transaction before
        persisting the new status.
        Events: HoldConfirmed
        """
        now = now or utcnow()
        self.ensure_can_confirm(now)

        from apps.reservations.domain.events import HoldConfirmed

        self.status = HoldStatus.CONFIRMED
        self.confirmed_at = now
        self.expires_at = None

        self.add_event(HoldConfirmed(
            aggregate_id=self.id,
            hold_id=self.id,
            room_id=self.room_id,
            stay=self.stay,
            units=self.units_requested,
        ))

    def cancel(self, reason: str = '', now: datetime | None = None) -> bool:
        """
        Cancel hold (PENDING/CONFIRMED -> CANCELLED)

        Returns False when the hold was already cancelled and nothing changed.
        Events: HoldCancelled
        """
        if self.status == HoldStatus.CANCELLED:
            return False
        if self.status == HoldStatus.COMPLETED:
            raise InvalidTransitionError(
                f"Cannot cancel completed hold {self.hold_code or self.id}",
                field='status',
            )

        from apps.reservations.domain.events import HoldCancelled

        old_status = self.status
        self.status = HoldStatus.CANCELLED
        self.cancelled_at = now or utcnow()
        self.cancellation_reason = reason
        self.expires_at = None

        self.add_event(HoldCancelled(
            aggregate_id=self.id,
            hold_id=self.id,
            room_id=self.room_id,
            reason=reason,
            old_status=old_status.value,
        ))
        return True

    def expire(self, now: datetime | None = None) -> bool:
        """Cancel a pending hold past its expiry; other holds are left alone"""
        now = now or utcnow()
        if not self.is_expired(now):
            return False
        return self.cancel(EXPIRED_REASON, now)

    def complete(self, now: datetime | None = None):
        """
        Complete hold (CONFIRMED -> COMPLETED)

        Events: HoldCompleted
        """
        if self.status != HoldStatus.CONFIRMED:
            raise InvalidTransitionError(
                f"Cannot complete hold {self.hold_code or self.id} from status {self.status.value}. "
                f"Hold must be CONFIRMED.",
                field='status',
            )

        from apps.reservations.domain.events import HoldCompleted

        self.status = HoldStatus.COMPLETED
        self.completed_at = now or utcnow()

        self.add_event(HoldCompleted(
            aggregate_id=self.id,
            hold_id=self.id,
            room_id=self.room_id,
        ))

    def __str__(self):
        return f"Hold {self.hold_code} ({self.status.value})"

    def __repr__(self):
        return (
            f"ReservationHold(id={self.id}, hold_code={self.hold_code}, "
            f"status={self.status.value}, stay={self.stay})"
        )
