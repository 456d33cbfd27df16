"""Celery tasks for reservation housekeeping."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .application.engine import booking_engine

logger = logging.getLogger(__name__)


@shared_task(name="reservations.expire_pending_holds")
def expire_pending_holds() -> dict[str, int]:
    """
    Cancel pending holds whose expiry has passed.

    Runs every minute through Celery Beat. Pending holds never consumed
    inventory, so expiring them leaves the quota calendar untouched.

    Returns:
        dict: {"expired": number of holds cancelled}
    """
    expired = booking_engine.expire_pending_holds()
    logger.debug(f"Hold expiry sweep finished, {expired} expired")
    return {"expired": expired}
