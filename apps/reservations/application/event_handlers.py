"""Default subscribers: record committed reservation events in the log."""

import logging

from shared.application.message_bus import message_bus
from apps.reservations.domain.events import (
    HoldCancelled,
    HoldCompleted,
    HoldConfirmed,
    HoldCreated,
    InventoryReleased,
    InventoryReserved,
)

logger = logging.getLogger(__name__)


@message_bus.subscribe(HoldCreated, HoldConfirmed, HoldCancelled, HoldCompleted)
def log_hold_event(event):
    logger.info(f"{event.name}: hold {event.hold_id} of room {event.room_id}")


@message_bus.subscribe(InventoryReserved, InventoryReleased)
def log_inventory_event(event):
    logger.info(f"{event.name}: room {event.room_id}, {event.units} unit(s), {event.stay}")
