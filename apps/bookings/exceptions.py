"""
Custom exceptions for the booking engine.
Raised in engine.py / ledger.py / capability.py and translated to JSON in views.

Each carries a stable `code` for API clients and the HTTP status it maps to.
"""


class BookingEngineError(Exception):
    """Base exception for all booking engine errors."""
    code = 'BOOKING_ERROR'
    http_status = 400


class InvalidService(BookingEngineError):
    """Raised when no Pricing exists for the requested style + variation."""
    code = 'INVALID_SERVICE'
    http_status = 400


class NoEligibleStylist(BookingEngineError):
    """Raised when the requested stylist is inactive, unknown or cannot perform the style."""
    code = 'NO_ELIGIBLE_STYLIST'
    http_status = 409


class SlotNoLongerAvailable(BookingEngineError):
    """Raised when the slot was taken between the availability query and the write."""
    code = 'SLOT_NO_LONGER_AVAILABLE'
    http_status = 409


class InvalidTransition(BookingEngineError):
    """Raised on a status change the booking state machine does not allow."""
    code = 'INVALID_TRANSITION'
    http_status = 409


class CheckInWindowClosed(BookingEngineError):
    """Raised when self check-in is attempted outside the window around the start time."""
    code = 'CHECK_IN_WINDOW_CLOSED'
    http_status = 409


class InvalidSlot(BookingEngineError):
    """Raised when the start time is not a bookable slot (closed day, off-grid, or runs past closing)."""
    code = 'INVALID_SLOT'
    http_status = 400


class PaymentNotConfirmed(BookingEngineError):
    """Raised when a booking is attempted without a succeeded, unused deposit payment."""
    code = 'PAYMENT_NOT_CONFIRMED'
    http_status = 402


class NotFound(BookingEngineError):
    """Raised for unknown booking / style / variation / stylist / promo ids."""
    code = 'NOT_FOUND'
    http_status = 404
