"""
Payment-layer failures. Both share the booking error base so the API views
render them the same `{code, detail}` way.
"""
from apps.bookings.exceptions import BookingEngineError


class PaymentFailed(BookingEngineError):
    """The gateway rejected the request. The message is the gateway's, verbatim."""
    code = 'PAYMENT_FAILED'
    http_status = 502


class PaymentGatewayTimeout(BookingEngineError):
    """The gateway did not answer within PAYMENT_GATEWAY_TIMEOUT_SECONDS."""
    code = 'PAYMENT_GATEWAY_TIMEOUT'
    http_status = 504
