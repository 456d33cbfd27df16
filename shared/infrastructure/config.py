"""Access to the ``BOOKING_ENGINE`` settings block with defaults."""

from __future__ import annotations

from typing import Any

from django.conf import settings  # type: ignore
from django.core.exceptions import ImproperlyConfigured  # type: ignore

DEFAULTS: dict[str, Any] = {
    "HOLD_TTL_MINUTES": 15,
    "DEFAULT_CURRENCY": "TRY",
    "MAX_STAY_NIGHTS": 365,
    "MAX_BULK_RANGE_DAYS": 730,
}


def engine_setting(name: str) -> Any:
    if name not in DEFAULTS:
        raise ImproperlyConfigured(f"Unknown BOOKING_ENGINE setting: {name}")
    overrides = getattr(settings, "BOOKING_ENGINE", {}) or {}
    return overrides.get(name, DEFAULTS[name])
