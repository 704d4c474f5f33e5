"""
Payment coordinator - deposit quoting and the intent → confirm half of the
two-phase checkout.

Public API:
  quote_deposit(config=None)
  create_intent(amount_minor_units, purpose=..., booking=None, deposit_quote=None, gateway=None)
  create_deposit_intent(config=None, gateway=None)
  confirm(intent_id, gateway=None)
  require_confirmed(intent_id, gateway=None)

Only gateway references are stored, never card data. Nothing here creates a
booking; `apps.bookings.ledger.reserve` does that once `require_confirmed`
has passed.
"""
import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.bookings.exceptions import NotFound, PaymentNotConfirmed
from apps.salon.config import SalonConfig, load_salon_config

from . import gateway as gw
from .models import IntentPurpose, IntentStatus, PaymentIntent

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


@dataclass(frozen=True)
class DepositQuote:
    deposit: Decimal
    processing_fee: Decimal
    total: Decimal
    total_minor_units: int
    currency: str


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def quote_deposit(config: SalonConfig = None) -> DepositQuote:
    """Deposit plus the processing fee, rounded to cents."""
    config = config or load_salon_config()
    deposit = config.deposit_amount.quantize(CENTS)
    fee = (deposit * config.processing_fee_rate).quantize(CENTS, rounding=ROUND_HALF_UP)
    total = deposit + fee
    return DepositQuote(
        deposit=deposit,
        processing_fee=fee,
        total=total,
        total_minor_units=to_minor_units(total),
        currency=config.currency,
    )


def _get_intent(intent_id, lock=False) -> PaymentIntent:
    qs = PaymentIntent.objects.select_for_update() if lock else PaymentIntent.objects
    try:
        return qs.get(id=intent_id)
    except (PaymentIntent.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Payment intent not found.")


def create_intent(amount_minor_units: int, purpose: str = IntentPurpose.DEPOSIT,
                  booking=None, deposit_quote: DepositQuote = None, currency: str = None,
                  gateway=None) -> PaymentIntent:
    """
    Open a gateway order for `amount_minor_units` and record it.
    The returned intent's `gateway_order_id` is what the client pays against.
    """
    gateway = gateway or gw.get_gateway()
    if currency is None:
        currency = deposit_quote.currency if deposit_quote else load_salon_config().currency
    receipt = f"{purpose}-{uuid.uuid4().hex[:12]}"
    notes = {'purpose': str(purpose)}
    if booking is not None:
        notes['booking_id'] = str(booking.id)

    order_id = gateway.create_order(amount_minor_units, currency, receipt, notes)

    intent = PaymentIntent.objects.create(
        gateway_order_id=order_id,
        purpose=purpose,
        amount=(Decimal(amount_minor_units) / 100).quantize(CENTS),
        amount_minor_units=amount_minor_units,
        deposit_amount=deposit_quote.deposit if deposit_quote else Decimal('0.00'),
        processing_fee=deposit_quote.processing_fee if deposit_quote else Decimal('0.00'),
        currency=currency,
        booking=booking,
    )
    logger.info('Payment intent %s created: order %s, %s %s (%s)',
                intent.id, order_id, intent.amount, currency, purpose)
    return intent


def create_deposit_intent(config: SalonConfig = None, gateway=None) -> PaymentIntent:
    quote = quote_deposit(config)
    return create_intent(
        quote.total_minor_units,
        purpose=IntentPurpose.DEPOSIT,
        deposit_quote=quote,
        gateway=gateway,
    )


def confirm(intent_id, gateway=None) -> str:
    """
    Ask the gateway where the intent stands and store the answer.
    Terminal states are not re-queried.

    Raises PaymentGatewayTimeout / PaymentFailed from the gateway adapter.
    """
    intent = _get_intent(intent_id)
    if intent.status in (IntentStatus.SUCCEEDED, IntentStatus.FAILED):
        return intent.status

    gateway = gateway or gw.get_gateway()
    result = gateway.order_status(intent.gateway_order_id)

    intent.status = {
        gw.SUCCEEDED: IntentStatus.SUCCEEDED,
        gw.FAILED: IntentStatus.FAILED,
    }.get(result, IntentStatus.PENDING)
    fields = ['status', 'updated_at']
    if intent.status == IntentStatus.SUCCEEDED:
        intent.confirmed_at = timezone.now()
        fields.append('confirmed_at')
    elif intent.status == IntentStatus.FAILED:
        intent.failure_reason = 'All payment attempts on the order failed.'
        fields.append('failure_reason')
    intent.save(update_fields=fields)

    logger.info('Payment intent %s confirmed as %s', intent.id, intent.status)
    return intent.status


def require_confirmed(intent_id, gateway=None) -> PaymentIntent:
    """
    The intent, guaranteed succeeded. A not-yet-succeeded intent is
    re-confirmed with the gateway once before giving up.

    Raises PaymentNotConfirmed otherwise.
    """
    intent = _get_intent(intent_id)
    if intent.status != IntentStatus.SUCCEEDED:
        status = confirm(intent.id, gateway=gateway)
        if status != IntentStatus.SUCCEEDED:
            raise PaymentNotConfirmed(
                f"Payment has not been confirmed (status: {status}). "
                "Complete the payment before booking."
            )
        intent.refresh_from_db()
    return intent
