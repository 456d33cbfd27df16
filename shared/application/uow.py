"""
Unit of Work Pattern

Wraps one database transaction around a use case, translates lost races
at the storage layer into ConcurrencyConflictError and publishes domain
events only after the transaction has committed.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import DatabaseError, IntegrityError, OperationalError, transaction

from shared.domain.base import DomainEvent
from shared.domain.exceptions import ConcurrencyConflictError

logger = logging.getLogger(__name__)

# SQLSTATE codes for serialization failure, deadlock and lock_not_available
CONFLICT_SQLSTATES = {'40001', '40P01', '55P03'}

CONFLICT_MARKERS = (
    'could not serialize',
    'deadlock',
    'database is locked',
    'database table is locked',
    'lock wait timeout',
    'could not obtain lock',
)

# Database-level CheckConstraint names that only fire when a writer raced us
CONFLICT_CONSTRAINTS = ('daily_quota_non_negative',)


def is_concurrency_failure(exc: BaseException) -> bool:
    """Whether a database error means "another transaction won the race"."""
    if not isinstance(exc, DatabaseError):
        return False
    message = str(exc).lower()
    if isinstance(exc, IntegrityError):
        return any(name in message for name in CONFLICT_CONSTRAINTS)
    if isinstance(exc, OperationalError):
        sqlstate = getattr(exc.__cause__, 'sqlstate', None) or getattr(exc.__cause__, 'pgcode', None)
        if sqlstate in CONFLICT_SQLSTATES:
            return True
        return any(marker in message for marker in CONFLICT_MARKERS)
    return False


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        pass

    @abstractmethod
    def rollback(self):
        pass

    @abstractmethod
    def collect_events(self, aggregate):
        pass


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            hold = hold_repo.get_by_id(hold_id, lock=True)
            ledger.reserve(hold.room_id, hold.check_in, hold.check_out, hold.units)
            hold.confirm()
            uow.collect_events(hold)
            hold_repo.save(hold)
        # committed here; events are published after commit

    Any exception rolls the whole transaction back, so a request that dies
    half way through a multi-night decrement leaves no partial state.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._transaction = None

    def __enter__(self):
        self._transaction = transaction.atomic()
        try:
            # BEGIN IMMEDIATE on SQLite can already time out on a busy writer
            self._transaction.__enter__()
        except DatabaseError as exc:
            if is_concurrency_failure(exc):
                raise ConcurrencyConflictError(
                    "Transaction could not be started because of a concurrent update"
                ) from exc
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

        try:
            self._transaction.__exit__(exc_type, exc_val, exc_tb)
        except DatabaseError as exc:
            # The COMMIT itself failed
            if is_concurrency_failure(exc):
                raise ConcurrencyConflictError(
                    "Transaction could not be committed because of a concurrent update"
                ) from exc
            raise

        if exc_val is not None and is_concurrency_failure(exc_val):
            raise ConcurrencyConflictError(
                "Transaction lost a race with a concurrent update"
            ) from exc_val
        return False

    def commit(self):
        """
        Schedule publication of collected events

        transaction.on_commit() guarantees they are only sent once the
        database commit succeeds; on rollback Django drops the callback.
        """
        logger.debug(f"Committing transaction with {len(self._events)} events")

        events = self._events.copy()
        self._events.clear()

        if events:
            transaction.on_commit(lambda: self._publish_events(events))

    def rollback(self):
        logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        self._events.clear()

    def collect_events(self, aggregate):
        """Drain domain events from an aggregate root"""
        new_events = aggregate.events
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                f"Collected {len(new_events)} events from "
                f"{aggregate.__class__.__name__} (ID: {aggregate.id})"
            )

    def _publish_events(self, events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")

        try:
            message_bus.publish_events(events)
        except Exception as e:
            # The state change is already committed; a failing subscriber is a monitoring concern
            logger.error(f"Error publishing events: {e}", exc_info=True)
