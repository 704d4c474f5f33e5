"""
Payment intent API.

Flow:
  1. POST /api/payments/intents/               → deposit quote + gateway order
  2. client pays the order in the gateway's own checkout
  3. POST /api/payments/intents/<id>/confirm/  → succeeded | failed | pending
  4. POST /api/bookings/ with paymentIntentId  → ledger re-confirms and reserves

No booking or slot is held at any point before step 4 succeeds.
"""
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from apps.bookings import ledger
from apps.bookings.exceptions import BookingEngineError, NotFound
from apps.bookings.views import can_access_booking
from apps.core.http import error_response, form_errors_response, invalid_body_response, parse_json_body

from . import coordinator
from .forms import IntentForm
from .models import IntentPurpose

logger = logging.getLogger(__name__)


def _intent_payload(intent) -> dict:
    return {
        'intentId': str(intent.id),
        'gatewayOrderId': intent.gateway_order_id,
        'gatewayKeyId': settings.RAZORPAY_KEY_ID,
        'purpose': intent.purpose,
        'status': intent.status,
        'amount': str(intent.amount),
        'amountMinorUnits': intent.amount_minor_units,
        'deposit': str(intent.deposit_amount),
        'processingFee': str(intent.processing_fee),
        'currency': intent.currency,
    }


@csrf_exempt
@require_POST
def create_intent(request):
    """POST /api/payments/intents/  {purpose?, bookingId?, amount?}"""
    body = parse_json_body(request)
    if body is None:
        return invalid_body_response()

    form = IntentForm(body)
    if not form.is_valid():
        return form_errors_response(form)
    d = form.cleaned_data

    try:
        if d['purpose'] == IntentPurpose.BALANCE:
            booking = ledger.get_booking(d['bookingId'])
            if not can_access_booking(request, booking):
                raise NotFound("Booking not found.")
            intent = coordinator.create_intent(
                coordinator.to_minor_units(d['amount']),
                purpose=IntentPurpose.BALANCE,
                booking=booking,
            )
        else:
            intent = coordinator.create_deposit_intent()
    except BookingEngineError as exc:
        return error_response(exc)

    return JsonResponse(_intent_payload(intent), status=201)


@csrf_exempt
@require_POST
def confirm_intent(request, intent_id):
    """POST /api/payments/intents/<id>/confirm/"""
    try:
        status = coordinator.confirm(intent_id)
    except BookingEngineError as exc:
        return error_response(exc)
    return JsonResponse({'intentId': str(intent_id), 'status': status})
