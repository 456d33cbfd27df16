"""
Reservation Command Handlers

Use cases of the reservation context. Each handler runs inside one
DjangoUnitOfWork: the hold row is locked, the quota ledger is touched
(when the transition needs it) and the new status is persisted, all in the
same transaction.

Commands:
- CreateHoldCommand: Place a pending hold with a quoted total
- ConfirmReservationCommand: Consume inventory and confirm a hold
- CancelReservationCommand: Cancel a hold, releasing inventory if consumed
- CompleteReservationCommand: Mark a confirmed stay as completed
- ExpirePendingHoldsCommand: Cancel pending holds past their expiry
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
import logging

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import NotFoundError
from shared.domain.value_objects import DateRange
from shared.infrastructure.config import engine_setting
from apps.reservations.domain.entities import HoldStatus, ReservationHold, utcnow
from apps.reservations.domain.events import HoldCreated, InventoryReleased, InventoryReserved
from apps.rooms.domain.quota import validate_units

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateHoldCommand:
    """Command to place a pending hold on a stay"""
    room_id: int
    check_in: date
    check_out: date
    units: int = 1
    guest_name: str = ''
    guest_email: str = ''
    created_by: object = None


@dataclass
class ConfirmReservationCommand:
    hold_id: int


@dataclass
class CancelReservationCommand:
    hold_id: int
    reason: str = ''


@dataclass
class CompleteReservationCommand:
    hold_id: int


@dataclass
class ExpirePendingHoldsCommand:
    now: datetime | None = None


# ===== Ledger transaction =====

class ReservationLedgerTransaction:
    """
    Hold state transitions together with their quota ledger effect

    Must be called inside an open unit of work on a hold loaded with a row
    lock, so the ledger change and the status change commit or roll back
    together.
    """

    def __init__(self, ledger):
        self.ledger = ledger

    def confirm(self, hold: ReservationHold, now: datetime | None = None) -> ReservationHold:
        """
        pending -> confirmed, reserving units_requested on every night

        InsufficientAvailabilityError propagates with the hold still pending.
        """
        now = now or utcnow()
        hold.ensure_can_confirm(now)

        self.ledger.reserve(hold.room_id, hold.check_in, hold.check_out, hold.units_requested)
        hold.add_event(InventoryReserved(
            aggregate_id=hold.id,
            room_id=hold.room_id,
            stay=hold.stay,
            units=hold.units_requested,
        ))

        hold.confirm(now)
        return hold

    def cancel(self, hold: ReservationHold, reason: str = '', now: datetime | None = None) -> bool:
        """
        Cancel a hold; only a confirmed hold gives its units back

        Returns False for an already cancelled hold (nothing is written).
        """
        releases_inventory = hold.holds_inventory

        if not hold.cancel(reason, now):
            return False

        if releases_inventory:
            self.ledger.release(hold.room_id, hold.check_in, hold.check_out, hold.units_requested)
            hold.add_event(InventoryReleased(
                aggregate_id=hold.id,
                room_id=hold.room_id,
                stay=hold.stay,
                units=hold.units_requested,
            ))
        return True

    def complete(self, hold: ReservationHold, now: datetime | None = None) -> ReservationHold:
        hold.complete(now)
        return hold


# ===== Command Handlers =====

class CreateHoldHandler:
    """
    Handler for CreateHold command

    The hold is created pending with the stay total quoted at creation time
    and an expiry HOLD_TTL_MINUTES ahead. No inventory is consumed until the
    hold is confirmed.
    """

    def __init__(self, hold_repo, calculator):
        self.hold_repo = hold_repo
        self.calculator = calculator

    def handle(self, command: CreateHoldCommand) -> ReservationHold:
        from apps.rooms.models import Room

        logger.info(
            f"Creating hold for room {command.room_id}, "
            f"dates {command.check_in} - {command.check_out}, units {command.units}"
        )

        stay = DateRange(command.check_in, command.check_out)
        validate_units(command.units)
        if not Room.objects.filter(pk=command.room_id, is_active=True).exists():
            raise NotFoundError(f"Room {command.room_id} not found or not active", field='room_id')

        quote = self.calculator.compute_total(command.room_id, stay.start_date, stay.end_date)
        # Every requested unit is charged the full stay
        quoted_total = quote.total * command.units
        now = utcnow()

        hold = ReservationHold(
            room_id=command.room_id,
            stay=stay,
            units_requested=command.units,
            status=HoldStatus.PENDING,
            quoted_total=quoted_total,
            guest_name=command.guest_name,
            guest_email=command.guest_email,
            expires_at=now + timedelta(minutes=engine_setting("HOLD_TTL_MINUTES")),
        )

        with DjangoUnitOfWork() as uow:
            self.hold_repo.add(hold, created_by=command.created_by)

            hold.add_event(HoldCreated(
                aggregate_id=hold.id,
                hold_id=hold.id,
                room_id=hold.room_id,
                hold_code=hold.hold_code,
                stay=hold.stay,
                units=hold.units_requested,
                quoted_total=quoted_total,
            ))
            uow.collect_events(hold)

        logger.info(f"Hold {hold.hold_code} (ID: {hold.id}) created, quoted {quoted_total}")
        return hold


class ConfirmReservationHandler:
    def __init__(self, hold_repo, ledger_transaction: ReservationLedgerTransaction):
        self.hold_repo = hold_repo
        self.ledger_transaction = ledger_transaction

    def handle(self, command: ConfirmReservationCommand) -> ReservationHold:
        logger.info(f"Confirming hold {command.hold_id}")

        with DjangoUnitOfWork() as uow:
            hold = self.hold_repo.get_by_id(command.hold_id, lock=True)
            self.ledger_transaction.confirm(hold)

            uow.collect_events(hold)
            self.hold_repo.save(hold)
            # Events: InventoryReserved, HoldConfirmed

        logger.info(f"Hold {hold.hold_code} confirmed")
        return hold


class CancelReservationHandler:
    def __init__(self, hold_repo, ledger_transaction: ReservationLedgerTransaction):
        self.hold_repo = hold_repo
        self.ledger_transaction = ledger_transaction

    def handle(self, command: CancelReservationCommand) -> ReservationHold:
        logger.info(f"Cancelling hold {command.hold_id}, reason: {command.reason or '-'}")

        with DjangoUnitOfWork() as uow:
            hold = self.hold_repo.get_by_id(command.hold_id, lock=True)
            changed = self.ledger_transaction.cancel(hold, command.reason)

            if changed:
                uow.collect_events(hold)
                self.hold_repo.save(hold)
                # Events: HoldCancelled (+ InventoryReleased when it was confirmed)

        if changed:
            logger.info(f"Hold {hold.hold_code} cancelled")
        else:
            logger.info(f"Hold {hold.hold_code} was already cancelled")
        return hold


class CompleteReservationHandler:
    def __init__(self, hold_repo, ledger_transaction: ReservationLedgerTransaction):
        self.hold_repo = hold_repo
        self.ledger_transaction = ledger_transaction

    def handle(self, command: CompleteReservationCommand) -> ReservationHold:
        logger.info(f"Completing hold {command.hold_id}")

        with DjangoUnitOfWork() as uow:
            hold = self.hold_repo.get_by_id(command.hold_id, lock=True)
            self.ledger_transaction.complete(hold)

            uow.collect_events(hold)
            self.hold_repo.save(hold)
            # Event: HoldCompleted

        logger.info(f"Hold {hold.hold_code} completed")
        return hold


class ExpirePendingHoldsHandler:
    """
    Cancels pending holds past their expiry, one transaction per hold

    A hold confirmed or cancelled between the scan and its lock is left
    alone. Pending holds never consumed inventory, so no ledger call is made.
    """

    def __init__(self, hold_repo):
        self.hold_repo = hold_repo

    def handle(self, command: ExpirePendingHoldsCommand) -> int:
        now = command.now or utcnow()
        expired = 0

        for hold_id in self.hold_repo.expired_pending_ids(now):
            with DjangoUnitOfWork() as uow:
                hold = self.hold_repo.get_by_id(hold_id, lock=True)
                if not hold.expire(now):
                    continue
                uow.collect_events(hold)
                self.hold_repo.save(hold)
            expired += 1

        if expired:
            logger.info(f"Expired {expired} pending hold(s)")
        return expired
