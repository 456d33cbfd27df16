"""
Reservation Domain Events

Published by the unit of work once the transaction that produced them
has committed.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange, Money


# ===== Hold lifecycle =====

@dataclass(kw_only=True)
class HoldCreated(DomainEvent):
    """
    Event: A guest placed a pending hold

    Triggers:
    - Hand the quoted total to the payment collaborator
    """
    hold_id: int
    room_id: int
    hold_code: str
    stay: DateRange
    units: int
    quoted_total: Money


@dataclass(kw_only=True)
class HoldConfirmed(DomainEvent):
    """Event: Hold confirmed and its inventory consumed (pending -> confirmed)"""
    hold_id: int
    room_id: int
    stay: DateRange
    units: int


@dataclass(kw_only=True)
class HoldCancelled(DomainEvent):
    """Event: Hold cancelled by a guest, an administrator or expiry"""
    hold_id: int
    room_id: int
    reason: str
    old_status: str


@dataclass(kw_only=True)
class HoldCompleted(DomainEvent):
    """Event: Stay finished (confirmed -> completed)"""
    hold_id: int
    room_id: int


# ===== Inventory =====

@dataclass(kw_only=True)
class InventoryReserved(DomainEvent):
    room_id: int
    stay: DateRange
    units: int


@dataclass(kw_only=True)
class InventoryReleased(DomainEvent):
    room_id: int
    stay: DateRange
    units: int
