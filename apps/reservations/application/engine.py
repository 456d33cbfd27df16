"""
Booking Engine Facade

Single entry point for collaborators (API views, Celery tasks, other apps)
that wires the room services, the quota ledger and the reservation
handlers together.
"""

from datetime import date, datetime
from decimal import Decimal

from apps.reservations.application.command_handlers import (
    CancelReservationCommand,
    CancelReservationHandler,
    CompleteReservationCommand,
    CompleteReservationHandler,
    ConfirmReservationCommand,
    ConfirmReservationHandler,
    CreateHoldCommand,
    CreateHoldHandler,
    ExpirePendingHoldsCommand,
    ExpirePendingHoldsHandler,
    ReservationLedgerTransaction,
)
from apps.reservations.domain.entities import ReservationHold
from apps.reservations.repositories import ReservationHoldRepository
from apps.rooms.domain.pricing import StayQuote
from apps.rooms.repositories import PricingProfileStore, QuotaLedger
from apps.rooms.services import (
    AvailabilityChecker,
    BulkEditResult,
    BulkRangeEditor,
    PriceResolver,
    StayPriceCalculator,
)


class BookingEngine:
    def __init__(
        self,
        store: PricingProfileStore | None = None,
        ledger: QuotaLedger | None = None,
        hold_repo: ReservationHoldRepository | None = None,
    ):
        self.store = store or PricingProfileStore()
        self.ledger = ledger or QuotaLedger()
        self.hold_repo = hold_repo or ReservationHoldRepository()

        self.resolver = PriceResolver(self.store)
        self.calculator = StayPriceCalculator(self.store)
        self.availability = AvailabilityChecker(self.ledger)
        self.editor = BulkRangeEditor(self.store, self.ledger)
        self.ledger_transaction = ReservationLedgerTransaction(self.ledger)

    # ===== Pricing & availability =====

    def resolve_price(self, room_id: int, day: date) -> Decimal:
        return self.resolver.resolve(room_id, day)

    def compute_stay_total(self, room_id: int, check_in: date, check_out: date) -> StayQuote:
        return self.calculator.compute_total(room_id, check_in, check_out)

    def check_availability(self, room_id: int, check_in: date, check_out: date, units: int = 1) -> bool:
        return self.availability.is_available(room_id, check_in, check_out, units)

    def apply_bulk_range(
        self,
        room_id: int,
        date_from: date,
        date_to: date,
        price: Decimal | None = None,
        quota: int | None = None,
    ) -> BulkEditResult:
        return self.editor.apply_range(room_id, date_from, date_to, price=price, quota=quota)

    # ===== Reservations =====

    def create_hold(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        units: int = 1,
        guest_name: str = '',
        guest_email: str = '',
        created_by=None,
    ) -> ReservationHold:
        handler = CreateHoldHandler(self.hold_repo, self.calculator)
        return handler.handle(CreateHoldCommand(
            room_id=room_id,
            check_in=check_in,
            check_out=check_out,
            units=units,
            guest_name=guest_name,
            guest_email=guest_email,
            created_by=created_by,
        ))

    def confirm_reservation(self, hold_id: int) -> ReservationHold:
        handler = ConfirmReservationHandler(self.hold_repo, self.ledger_transaction)
        return handler.handle(ConfirmReservationCommand(hold_id=hold_id))

    def cancel_reservation(self, hold_id: int, reason: str = '') -> ReservationHold:
        handler = CancelReservationHandler(self.hold_repo, self.ledger_transaction)
        return handler.handle(CancelReservationCommand(hold_id=hold_id, reason=reason))

    def complete_reservation(self, hold_id: int) -> ReservationHold:
        handler = CompleteReservationHandler(self.hold_repo, self.ledger_transaction)
        return handler.handle(CompleteReservationCommand(hold_id=hold_id))

    def expire_pending_holds(self, now: datetime | None = None) -> int:
        handler = ExpirePendingHoldsHandler(self.hold_repo)
        return handler.handle(ExpirePendingHoldsCommand(now=now))


# Default wiring
booking_engine = BookingEngine()
