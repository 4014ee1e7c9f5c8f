"""
Custom exceptions for the booking engine.
Raised in engine.py / policies.py and mapped to JSON responses by
apps.core.decorators.json_api.

The generic ValidationError / NotFoundError / ForbiddenError live in
apps.core.exceptions and are re-exported here so engine callers have a
single import point.
"""
from apps.core.exceptions import DomainError, ForbiddenError, NotFoundError, ValidationError  # noqa: F401


class BookingEngineError(DomainError):
    """Base exception for all booking engine errors."""
    code = 'booking_error'


class CapacityError(BookingEngineError):
    """Raised when the requested occurrence already holds `capacity` active bookings."""
    status_code = 409
    code = 'capacity_exceeded'
    default_message = 'No slots available for this time.'


class DuplicateBookingError(CapacityError):
    """Raised when the client already holds an active booking for the same occurrence."""
    code = 'duplicate_booking'
    default_message = 'You already have a booking for this time.'


class AllowanceError(BookingEngineError):
    """Raised when the client's session allowance is used up."""
    status_code = 403
    code = 'allowance_exhausted'
    default_message = 'No available session slots. Please check your membership status.'


class ChangeWindowError(BookingEngineError):
    """Raised when a non-cancel status change is attempted inside the change window."""
    status_code = 403
    code = 'change_window'

    def __init__(self, threshold_hours):
        self.threshold_hours = threshold_hours
        super().__init__(
            f'Bookings can only be changed {threshold_hours} hours or more before the session starts.'
        )


class AlreadyInStatusError(BookingEngineError):
    """Raised when the booking already has the requested status."""
    status_code = 409
    code = 'already_in_status'


class InvalidTransitionError(BookingEngineError):
    """Raised when the requested status cannot be reached from the current one."""
    code = 'invalid_transition'


class AlreadyCheckedInError(BookingEngineError):
    """Raised on a second check-in; check-in is not idempotent."""
    code = 'already_checked_in'
    default_message = 'Client already checked in.'
