"""
Razorpay adapter.

The rest of the project only sees `create_order()` and `order_status()`;
Razorpay's own status vocabulary and exception types stop here.
"""
import logging

import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError, ServerError
from django.conf import settings

from .exceptions import PaymentFailed, PaymentGatewayTimeout

logger = logging.getLogger(__name__)

SUCCEEDED = 'succeeded'
FAILED = 'failed'
PENDING = 'pending'


class RazorpayGateway:

    def __init__(self, client=None, timeout=None):
        self.client = client or razorpay.Client(
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
        )
        self.timeout = timeout or settings.PAYMENT_GATEWAY_TIMEOUT_SECONDS

    def _call(self, action, func, *args):
        try:
            return func(*args, timeout=self.timeout)
        except requests.exceptions.Timeout as exc:
            logger.warning('Razorpay %s timed out after %ss', action, self.timeout)
            raise PaymentGatewayTimeout(
                'The payment gateway did not respond in time. Please try again.'
            ) from exc
        except (BadRequestError, GatewayError, ServerError,
                requests.exceptions.RequestException) as exc:
            logger.exception('Razorpay %s failed: %s', action, exc)
            raise PaymentFailed(str(exc)) from exc

    def create_order(self, amount_minor_units: int, currency: str, receipt: str, notes: dict) -> str:
        """Create a gateway order and return its id."""
        order = self._call('order.create', self.client.order.create, {
            'amount': amount_minor_units,
            'currency': currency,
            'receipt': receipt[:40],
            'notes': notes,
        })
        return order['id']

    def order_status(self, order_id: str) -> str:
        """
        Collapse a Razorpay order into succeeded / failed / pending.

        `paid` orders are done. An `attempted` order failed only if every
        payment on it failed; anything authorised or still in flight is pending.
        """
        order = self._call('order.fetch', self.client.order.fetch, order_id)
        status = order.get('status')
        if status == 'paid':
            return SUCCEEDED
        if status != 'attempted':
            return PENDING

        payments = self._call('order.payments', self.client.order.payments, order_id)
        items = payments.get('items', [])
        if any(p.get('status') == 'captured' for p in items):
            return SUCCEEDED
        if items and all(p.get('status') == 'failed' for p in items):
            return FAILED
        return PENDING


def get_gateway():
    return RazorpayGateway()
