"""Tests for database error classification and the unit of work."""

import pytest
from django.db import DatabaseError, IntegrityError, OperationalError

from shared.application.uow import DjangoUnitOfWork, is_concurrency_failure
from shared.domain.exceptions import ConcurrencyConflictError


@pytest.mark.parametrize(
    "error",
    [
        OperationalError("database is locked"),
        OperationalError("could not serialize access due to concurrent update"),
        OperationalError("deadlock detected"),
        IntegrityError("CHECK constraint failed: daily_quota_non_negative"),
    ],
)
def test_lost_races_are_concurrency_failures(error):
    assert is_concurrency_failure(error)


@pytest.mark.parametrize(
    "error",
    [
        OperationalError("no such table: rooms_room"),
        IntegrityError("UNIQUE constraint failed: reservations_reservationhold.hold_code"),
        DatabaseError("connection refused"),
        ValueError("database is locked"),
    ],
)
def test_other_errors_are_not_concurrency_failures(error):
    assert not is_concurrency_failure(error)


@pytest.mark.django_db
def test_unit_of_work_translates_lock_failures():
    with pytest.raises(ConcurrencyConflictError) as excinfo:
        with DjangoUnitOfWork():
            raise OperationalError("database is locked")

    assert isinstance(excinfo.value.__cause__, OperationalError)


@pytest.mark.django_db
def test_unit_of_work_lets_other_errors_through():
    with pytest.raises(KeyError):
        with DjangoUnitOfWork():
            raise KeyError("room")
