"""Reservation lifecycle through the booking engine, against the database."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from apps.reservations.domain.entities import EXPIRED_REASON, HoldStatus, utcnow
from apps.reservations.domain.events import (
    HoldCancelled,
    HoldConfirmed,
    HoldCreated,
    InventoryReleased,
    InventoryReserved,
)
from apps.reservations.models import ReservationHold as ReservationHoldModel
from apps.reservations.tasks import expire_pending_holds
from apps.rooms.models import DailyQuota
from apps.rooms.repositories import QuotaLedger
from shared.application.message_bus import message_bus
from shared.domain.exceptions import (
    InsufficientAvailabilityError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from shared.domain.value_objects import DateRange, Money

pytestmark = pytest.mark.django_db

CHECK_IN = date(2025, 10, 10)
CHECK_OUT = date(2025, 10, 13)


def remaining(room, check_in=CHECK_IN, check_out=CHECK_OUT) -> list[int]:
    ledger = QuotaLedger()
    return [ledger.get(room.id, night) for night in DateRange(check_in, check_out).nights()]


def stored_status(hold) -> str:
    return ReservationHoldModel.objects.values_list("status", flat=True).get(pk=hold.id)


class TestCreateHold:
    def test_pending_hold_with_quoted_total(self, engine, make_room):
        room = make_room(room_count=2, base_price="1000")

        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT, units=2, guest_name="Ayşe Demir")

        assert hold.status is HoldStatus.PENDING
        assert hold.quoted_total == Money(Decimal("6000"), "TRY")
        assert len(hold.hold_code) == 8
        assert hold.expires_at > utcnow()

        row = ReservationHoldModel.objects.get(pk=hold.id)
        assert row.hold_code == hold.hold_code
        assert row.quoted_total == Decimal("6000.00")
        assert row.units_requested == 2
        assert row.guest_name == "Ayşe Demir"

    def test_does_not_touch_inventory(self, engine, make_room):
        room = make_room(room_count=2)

        engine.create_hold(room.id, CHECK_IN, CHECK_OUT)

        assert not DailyQuota.objects.filter(calendar__room=room).exists()

    def test_inactive_room(self, engine, make_room):
        room = make_room(is_active=False)

        with pytest.raises(NotFoundError):
            engine.create_hold(room.id, CHECK_IN, CHECK_OUT)

    def test_empty_stay(self, engine, make_room):
        room = make_room()

        with pytest.raises(ValidationError):
            engine.create_hold(room.id, CHECK_IN, CHECK_IN)
        assert not ReservationHoldModel.objects.exists()

    def test_zero_units(self, engine, make_room):
        room = make_room()

        with pytest.raises(ValidationError) as excinfo:
            engine.create_hold(room.id, CHECK_IN, CHECK_OUT, units=0)

        assert excinfo.value.field == "units"


class TestConfirmReservation:
    def test_pool_of_three_sells_three_units(self, engine, make_room):
        room = make_room(room_count=3)
        night = (date(2025, 10, 10), date(2025, 10, 11))
        holds = [engine.create_hold(room.id, *night) for _ in range(4)]

        for hold in holds[:3]:
            assert engine.confirm_reservation(hold.id).status is HoldStatus.CONFIRMED

        with pytest.raises(InsufficientAvailabilityError) as excinfo:
            engine.confirm_reservation(holds[3].id)

        assert excinfo.value.dates == [date(2025, 10, 10)]
        assert stored_status(holds[3]) == "pending"
        assert QuotaLedger().get(room.id, date(2025, 10, 10)) == 0

    def test_decrements_every_night_by_units(self, engine, make_room):
        room = make_room(room_count=3)
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT, units=2)

        engine.confirm_reservation(hold.id)

        assert remaining(room) == [1, 1, 1]
        assert QuotaLedger().get(room.id, CHECK_OUT) == 3
        assert stored_status(hold) == "confirmed"

    def test_failure_leaves_every_night_untouched(self, engine, make_room):
        room = make_room(room_count=2)
        engine.apply_bulk_range(room.id, date(2025, 10, 12), date(2025, 10, 12), quota=0)
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)

        with pytest.raises(InsufficientAvailabilityError):
            engine.confirm_reservation(hold.id)

        assert remaining(room) == [2, 2, 0]
        assert list(DailyQuota.objects.filter(calendar__room=room).values_list("date", flat=True)) == [
            date(2025, 10, 12)
        ]

    def test_twice_is_rejected(self, engine, make_room):
        room = make_room(room_count=3)
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        engine.confirm_reservation(hold.id)

        with pytest.raises(InvalidTransitionError):
            engine.confirm_reservation(hold.id)

        assert remaining(room) == [2, 2, 2]

    def test_expired_hold_is_rejected(self, engine, make_room):
        room = make_room()
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        ReservationHoldModel.objects.filter(pk=hold.id).update(expires_at=utcnow() - timedelta(minutes=1))

        with pytest.raises(InvalidTransitionError):
            engine.confirm_reservation(hold.id)

        assert remaining(room) == [1, 1, 1]

    def test_unknown_hold(self, engine):
        with pytest.raises(NotFoundError):
            engine.confirm_reservation(999_999)


class TestCancelReservation:
    def test_pending_hold_leaves_calendar_unchanged(self, engine, make_room):
        room = make_room(room_count=2)
        engine.apply_bulk_range(room.id, CHECK_IN, CHECK_IN, quota=1)
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        before = list(DailyQuota.objects.filter(calendar__room=room).values_list("date", "quota"))

        cancelled = engine.cancel_reservation(hold.id, reason="changed plans")

        assert cancelled.status is HoldStatus.CANCELLED
        assert list(DailyQuota.objects.filter(calendar__room=room).values_list("date", "quota")) == before
        assert remaining(room) == [1, 2, 2]

    def test_confirmed_hold_releases_inventory(self, engine, make_room):
        room = make_room(room_count=3)
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT, units=2)
        engine.confirm_reservation(hold.id)

        engine.cancel_reservation(hold.id)

        assert remaining(room) == [3, 3, 3]
        assert stored_status(hold) == "cancelled"

    def test_second_cancel_is_a_no_op(self, engine, make_room):
        room = make_room(room_count=3)
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        engine.confirm_reservation(hold.id)
        engine.cancel_reservation(hold.id, reason="first")

        again = engine.cancel_reservation(hold.id, reason="second")

        assert again.status is HoldStatus.CANCELLED
        assert again.cancellation_reason == "first"
        assert remaining(room) == [3, 3, 3]

    def test_completed_hold_cannot_be_cancelled(self, engine, make_room):
        room = make_room(room_count=3)
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        engine.confirm_reservation(hold.id)
        engine.complete_reservation(hold.id)

        with pytest.raises(InvalidTransitionError):
            engine.cancel_reservation(hold.id)

        assert remaining(room) == [2, 2, 2]
        assert stored_status(hold) == "completed"


class TestQuotaResetWithBookedUnits:
    def test_reset_is_refused_while_a_confirmed_hold_occupies_the_night(self, engine, make_room):
        room = make_room(room_count=2)
        hold = engine.create_hold(room.id, date(2025, 9, 1), date(2025, 9, 2))
        engine.confirm_reservation(hold.id)

        with pytest.raises(ValidationError) as excinfo:
            QuotaLedger().clear_quota(room.id, date(2025, 9, 1))

        assert excinfo.value.field == "date"
        assert QuotaLedger().get(room.id, date(2025, 9, 1)) == 1

        engine.cancel_reservation(hold.id)

        assert QuotaLedger().get(room.id, date(2025, 9, 1)) == 2

    def test_completed_stay_still_blocks_the_reset(self, engine, make_room):
        room = make_room(room_count=2)
        hold = engine.create_hold(room.id, date(2025, 9, 1), date(2025, 9, 3))
        engine.confirm_reservation(hold.id)
        engine.complete_reservation(hold.id)

        with pytest.raises(ValidationError):
            QuotaLedger().clear_quota(room.id, date(2025, 9, 2))

    def test_reset_allowed_once_the_hold_is_cancelled(self, engine, make_room):
        room = make_room(room_count=2)
        hold = engine.create_hold(room.id, date(2025, 9, 1), date(2025, 9, 2))
        engine.confirm_reservation(hold.id)
        engine.cancel_reservation(hold.id)

        assert QuotaLedger().clear_quota(room.id, date(2025, 9, 1))
        assert QuotaLedger().get(room.id, date(2025, 9, 1)) == 2

    def test_check_out_night_can_be_reset(self, engine, make_room):
        room = make_room(room_count=2)
        QuotaLedger().set_quota(room.id, [date(2025, 9, 2)], 1)
        hold = engine.create_hold(room.id, date(2025, 9, 1), date(2025, 9, 2))
        engine.confirm_reservation(hold.id)

        assert QuotaLedger().clear_quota(room.id, date(2025, 9, 2))


class TestCompleteReservation:
    def test_pending_hold_cannot_complete(self, engine, make_room):
        room = make_room()
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)

        with pytest.raises(InvalidTransitionError):
            engine.complete_reservation(hold.id)

        assert stored_status(hold) == "pending"

    def test_completion_keeps_inventory_consumed(self, engine, make_room):
        room = make_room(room_count=2)
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        engine.confirm_reservation(hold.id)

        completed = engine.complete_reservation(hold.id)

        assert completed.status is HoldStatus.COMPLETED
        assert completed.completed_at is not None
        assert remaining(room) == [1, 1, 1]


class TestExpirePendingHolds:
    def test_cancels_only_pending_holds_past_expiry(self, engine, make_room):
        room = make_room(room_count=3)
        stale = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        fresh = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        confirmed = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        engine.confirm_reservation(confirmed.id)
        ReservationHoldModel.objects.filter(pk=stale.id).update(expires_at=utcnow() - timedelta(minutes=5))

        assert engine.expire_pending_holds() == 1

        row = ReservationHoldModel.objects.get(pk=stale.id)
        assert row.status == "cancelled"
        assert row.cancellation_reason == EXPIRED_REASON
        assert stored_status(fresh) == "pending"
        assert stored_status(confirmed) == "confirmed"
        assert remaining(room) == [2, 2, 2]

    def test_sweep_with_explicit_clock(self, engine, make_room):
        room = make_room()
        engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        engine.create_hold(room.id, CHECK_IN, CHECK_OUT)

        assert engine.expire_pending_holds(now=utcnow() + timedelta(hours=1)) == 2
        assert engine.expire_pending_holds(now=utcnow() + timedelta(hours=1)) == 0

    def test_celery_task(self, engine, make_room):
        room = make_room()
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        ReservationHoldModel.objects.filter(pk=hold.id).update(expires_at=utcnow() - timedelta(seconds=1))

        result = expire_pending_holds.delay()

        assert result.get() == {"expired": 1}
        assert stored_status(hold) == "cancelled"


class TestDomainEvents:
    @pytest.fixture
    def published(self, monkeypatch):
        events = []
        monkeypatch.setattr(message_bus, "publish_events", events.extend)
        return events

    def test_events_follow_the_commit(self, engine, make_room, published, django_capture_on_commit_callbacks):
        room = make_room(room_count=2)

        with django_capture_on_commit_callbacks(execute=True):
            hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)
        with django_capture_on_commit_callbacks(execute=True):
            engine.confirm_reservation(hold.id)
        with django_capture_on_commit_callbacks(execute=True):
            engine.cancel_reservation(hold.id, reason="guest request")

        assert [type(event) for event in published] == [
            HoldCreated,
            InventoryReserved,
            HoldConfirmed,
            HoldCancelled,
            InventoryReleased,
        ]
        assert all(event.aggregate_id == hold.id for event in published)

    def test_nothing_is_published_when_confirm_fails(
        self, engine, make_room, published, django_capture_on_commit_callbacks
    ):
        room = make_room()
        engine.apply_bulk_range(room.id, CHECK_IN, CHECK_IN, quota=0)
        hold = engine.create_hold(room.id, CHECK_IN, CHECK_OUT)

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(InsufficientAvailabilityError):
                engine.confirm_reservation(hold.id)

        assert callbacks == []
        assert published == []
