"""Shared pytest fixtures."""

from __future__ import annotations

from decimal import Decimal

import pytest

from apps.reservations.application.engine import BookingEngine
from apps.rooms.models import Room


@pytest.fixture
def engine() -> BookingEngine:
    return BookingEngine()


@pytest.fixture
def make_room(db):
    """Create a room; its pricing profile and quota calendar come from the post_save signal."""

    def _make_room(name: str = "Deluxe Sea View", room_count: int = 1, base_price: str | None = None, **extra):
        room = Room.objects.create(name=name, hotel_name="Hotel Bosphorus", room_count=room_count, **extra)
        if base_price is not None:
            profile = room.pricing_profile
            profile.base_nightly_price = Decimal(base_price)
            profile.save(update_fields=["base_nightly_price", "updated_at"])
        return room

    return _make_room
