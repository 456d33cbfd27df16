"""
Domain Error Taxonomy

Every error the calendar engine raises on purpose derives from DomainError.
The HTTP layer maps each class to a status code; anything else (database
connectivity and the like) is an infrastructure error and propagates as is.
"""

from datetime import date
from typing import Iterable, List


class DomainError(Exception):
    """Base class for engine errors"""

    code = 'domain_error'

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        payload = {'detail': self.message, 'code': self.code}
        if self.field:
            payload['field'] = self.field
        return payload


class ValidationError(DomainError):
    """Malformed input: inverted range, zero nights, empty bulk edit, negative values"""

    code = 'validation_error'


class NotFoundError(DomainError):
    """Unknown room or reservation hold"""

    code = 'not_found'


class InsufficientAvailabilityError(DomainError):
    """
    At least one night of the requested stay cannot supply the requested units

    The booking workflow is expected to send the guest back to search.
    """

    code = 'insufficient_availability'

    def __init__(self, room_id: int, units: int, dates: Iterable[date]):
        self.room_id = room_id
        self.units = units
        self.dates: List[date] = sorted(dates)
        listed = ', '.join(d.isoformat() for d in self.dates)
        super().__init__(
            f"Room {room_id} cannot supply {units} unit(s) on: {listed}"
        )

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload['dates'] = [d.isoformat() for d in self.dates]
        return payload


class ConcurrencyConflictError(DomainError):
    """
    The transaction lost a race at the storage layer

    Callers may retry the whole booking attempt (re-check availability first),
    never the bare decrement.
    """

    code = 'concurrency_conflict'


class InvalidTransitionError(DomainError):
    """A reservation hold was asked to move to a state it cannot reach"""

    code = 'invalid_transition'
