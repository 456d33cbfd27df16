"""Hold lifecycle rules, without the database."""

from datetime import date, datetime, timedelta, timezone

import pytest

from apps.reservations.domain.entities import EXPIRED_REASON, HoldStatus, ReservationHold
from apps.reservations.domain.events import HoldCancelled, HoldCompleted, HoldConfirmed
from shared.domain.exceptions import InvalidTransitionError, ValidationError
from shared.domain.value_objects import DateRange

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_hold(status=HoldStatus.PENDING, **overrides):
    fields = {
        "id": 7,
        "room_id": 1,
        "stay": DateRange(date(2025, 9, 1), date(2025, 9, 4)),
        "units_requested": 1,
        "status": status,
        "hold_code": "A1B2C3D4",
        "expires_at": NOW + timedelta(minutes=15),
    }
    fields.update(overrides)
    return ReservationHold(**fields)


@pytest.mark.parametrize("units", [0, -2, True, 1.5])
def test_units_must_be_a_positive_integer(units):
    with pytest.raises(ValidationError) as excinfo:
        make_hold(units_requested=units)

    assert excinfo.value.field == "units"


def test_confirm_pending_hold():
    hold = make_hold()

    hold.confirm(NOW)

    assert hold.status is HoldStatus.CONFIRMED
    assert hold.confirmed_at == NOW
    assert hold.expires_at is None
    assert hold.holds_inventory
    assert [type(event) for event in hold.events] == [HoldConfirmed]


def test_confirm_after_expiry_is_rejected():
    hold = make_hold(expires_at=NOW - timedelta(seconds=1))

    with pytest.raises(InvalidTransitionError) as excinfo:
        hold.confirm(NOW)

    assert excinfo.value.field == "expires_at"
    assert hold.status is HoldStatus.PENDING
    assert hold.events == []


@pytest.mark.parametrize("status", [HoldStatus.CONFIRMED, HoldStatus.CANCELLED, HoldStatus.COMPLETED])
def test_only_pending_holds_confirm(status):
    with pytest.raises(InvalidTransitionError):
        make_hold(status=status).confirm(NOW)


@pytest.mark.parametrize("status", [HoldStatus.PENDING, HoldStatus.CONFIRMED])
def test_cancel(status):
    hold = make_hold(status=status)

    assert hold.cancel("guest changed plans", NOW) is True

    assert hold.status is HoldStatus.CANCELLED
    assert hold.cancelled_at == NOW
    assert hold.cancellation_reason == "guest changed plans"
    event = hold.events[-1]
    assert isinstance(event, HoldCancelled)
    assert event.old_status == status.value


def test_cancel_twice_changes_nothing():
    hold = make_hold(status=HoldStatus.CANCELLED, cancellation_reason="first", cancelled_at=NOW)

    assert hold.cancel("second", NOW + timedelta(hours=1)) is False

    assert hold.cancellation_reason == "first"
    assert hold.cancelled_at == NOW
    assert hold.events == []


def test_completed_hold_cannot_be_cancelled():
    with pytest.raises(InvalidTransitionError):
        make_hold(status=HoldStatus.COMPLETED).cancel("too late", NOW)


def test_complete_requires_confirmation():
    with pytest.raises(InvalidTransitionError):
        make_hold().complete(NOW)

    hold = make_hold(status=HoldStatus.CONFIRMED)
    hold.complete(NOW)

    assert hold.status is HoldStatus.COMPLETED
    assert hold.completed_at == NOW
    assert not hold.holds_inventory
    assert isinstance(hold.events[-1], HoldCompleted)


class TestExpiry:
    def test_pending_hold_past_expiry(self):
        hold = make_hold(expires_at=NOW)

        assert hold.is_expired(NOW)
        assert hold.expire(NOW) is True
        assert hold.status is HoldStatus.CANCELLED
        assert hold.cancellation_reason == EXPIRED_REASON

    def test_pending_hold_within_window(self):
        hold = make_hold()

        assert hold.expire(NOW) is False
        assert hold.status is HoldStatus.PENDING

    def test_confirmed_hold_never_expires(self):
        hold = make_hold(status=HoldStatus.CONFIRMED, expires_at=NOW - timedelta(days=1))

        assert not hold.is_expired(NOW)
        assert hold.expire(NOW) is False
        assert hold.status is HoldStatus.CONFIRMED
