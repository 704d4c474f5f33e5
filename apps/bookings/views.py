"""
Booking API views - thin JSON wrappers around the engine and the ledger.

  GET   /api/availability/
  GET   /api/bookings/                customers see their own, staff see all
  POST  /api/bookings/
  GET   /api/bookings/<id>/           owner, staff, or ?token=<access_token>
  PATCH /api/bookings/<id>/           admin, or the booking's own stylist; restore and
                                      reassign are admin-only
  POST  /api/bookings/<id>/payments/  staff
  POST  /api/bookings/<id>/check-in/  owner, staff, or ?token=<access_token>

Business errors come back as `{code, detail}` with the status each
exception carries; form errors as 400 VALIDATION_ERROR.
"""
import logging

from django.db.models import Q
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from apps.core.decorators import role_required
from apps.core.http import (
    error_response,
    form_errors_response,
    invalid_body_response,
    parse_json_body,
)
from apps.core.roles import ADMIN, CUSTOMER, STAFF_ROLES, STYLIST, actor_label, actor_role

from . import ledger
from .engine import get_slots
from .exceptions import BookingEngineError, NotFound
from .forms import (
    AvailabilityQueryForm,
    BookingListQueryForm,
    BookingUpdateForm,
    CustomerInfoForm,
    PaymentForm,
    ReserveForm,
)
from .models import Booking, BookingStatus

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def booking_payload(booking) -> dict:
    balance = ledger.amount_due(booking)
    return {
        'id': str(booking.id),
        'reference': booking.id_short,
        'status': booking.status,
        'customer': {
            'fullName': booking.customer_name,
            'email': booking.customer_email,
            'phone': booking.customer_phone,
            'smsConsent': booking.sms_consent,
        },
        'style': {'id': str(booking.style_id), 'name': booking.style.name},
        'variation': {'id': str(booking.variation_id), 'name': booking.variation.name},
        'stylist': {'id': str(booking.stylist_id), 'name': booking.stylist.full_name},
        'promoId': str(booking.promo_id) if booking.promo_id else None,
        'date': booking.booking_date.isoformat(),
        'time': booking.start_time.strftime('%H:%M'),
        'end': booking.end_time.strftime('%H:%M'),
        'durationMinutes': booking.duration_minutes,
        'price': str(booking.price),
        'surcharge': str(booking.surcharge_amount),
        'discount': str(booking.discount_amount),
        'deposit': str(booking.deposit_amount),
        'payments': [
            {
                'amount': str(p.amount),
                'method': p.method,
                'gatewayRef': p.gateway_ref,
                'isDeposit': p.is_deposit,
                'paidAt': p.paid_at.isoformat(),
            }
            for p in booking.payments.all()
        ],
        'balance': {
            'servicePrice': str(balance.service_price),
            'depositAmount': str(balance.deposit_amount),
            'depositPaid': str(balance.deposit_paid),
            'servicePaid': str(balance.service_paid),
            'amountDue': str(balance.amount_due),
        },
        'notes': booking.notes,
    }


def can_access_booking(request, booking) -> bool:
    """Staff, the customer who booked, or anyone holding the booking's access token."""
    if actor_role(request.user) in STAFF_ROLES:
        return True
    if request.user.is_authenticated and booking.customer_id == request.user.id:
        return True
    token = request.GET.get('token')
    return bool(token) and token == str(booking.access_token)


def _load_visible_booking(request, booking_id):
    booking = ledger.get_booking(booking_id)
    if not can_access_booking(request, booking):
        # Same answer as a missing booking
        raise NotFound("Booking not found.")
    return booking


# ─────────────────────────────────────────────────────────────────────────────
# Availability
# ─────────────────────────────────────────────────────────────────────────────

@require_GET
def availability(request):
    """
    GET /api/availability/?date=YYYY-MM-DD&styleId=<uuid>&variationId=<uuid>
        [&stylistId=<uuid>][&excludeBookingId=<uuid>]
    """
    form = AvailabilityQueryForm(request.GET)
    if not form.is_valid():
        return form_errors_response(form)
    d = form.cleaned_data

    try:
        slots = get_slots(
            d['date'], d['styleId'], d['variationId'],
            stylist_id=d.get('stylistId'),
            exclude_booking_id=d.get('excludeBookingId'),
        )
    except BookingEngineError as exc:
        return error_response(exc)

    return JsonResponse({'date': d['date'].isoformat(), 'slots': slots})


# ─────────────────────────────────────────────────────────────────────────────
# Bookings
# ─────────────────────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(['GET', 'POST'])
def bookings(request):
    if request.method == 'POST':
        return _create_booking(request)
    return _list_bookings(request)


@role_required(ADMIN, STYLIST, CUSTOMER)
def _list_bookings(request):
    """
    GET /api/bookings/?date=&dateFrom=&dateTo=&status=&stylistId=&q=
    Customers only ever see their own bookings.
    """
    form = BookingListQueryForm(request.GET)
    if not form.is_valid():
        return form_errors_response(form)
    d = form.cleaned_data

    qs = (
        Booking.objects
        .select_related('style', 'variation', 'stylist')
        .prefetch_related('payments')
        .order_by('-booking_date', '-start_time')
    )
    if request.actor_role == CUSTOMER:
        qs = qs.filter(customer=request.user)

    if d.get('date'):
        qs = qs.filter(booking_date=d['date'])
    if d.get('dateFrom'):
        qs = qs.filter(booking_date__gte=d['dateFrom'])
    if d.get('dateTo'):
        qs = qs.filter(booking_date__lte=d['dateTo'])
    if d.get('status'):
        qs = qs.filter(status=d['status'])
    if d.get('stylistId'):
        qs = qs.filter(stylist_id=d['stylistId'])
    if d.get('q'):
        qs = qs.filter(
            Q(customer_name__icontains=d['q']) |
            Q(customer_email__icontains=d['q']) |
            Q(customer_phone__icontains=d['q']) |
            Q(style__name__icontains=d['q'])
        )

    payload = [booking_payload(b) for b in qs]
    return JsonResponse({'bookings': payload, 'count': len(payload)})


def _create_booking(request):
    """
    POST /api/bookings/
    {styleId, variationId, stylistId?, date, time, customerInfo{...}, paymentIntentId, promoId?}
    """
    body = parse_json_body(request)
    if body is None:
        return invalid_body_response()

    form = ReserveForm(body)
    customer_form = CustomerInfoForm(body.get('customerInfo') or {})
    if not form.is_valid():
        return form_errors_response(form)
    if not customer_form.is_valid():
        return form_errors_response(customer_form)
    d = form.cleaned_data

    try:
        booking = ledger.reserve(
            style_id=d['styleId'],
            variation_id=d['variationId'],
            stylist_id=d.get('stylistId'),
            booking_date=d['date'],
            start_time=d['time'],
            customer_info=customer_form.to_customer_info(),
            deposit_payment_ref=d['paymentIntentId'],
            promo_id=d.get('promoId'),
            customer=request.user,
            notes=d.get('notes', ''),
        )
    except BookingEngineError as exc:
        logger.info('Reserve rejected (%s): %s', exc.code, exc)
        return error_response(exc)

    payload = booking_payload(booking)
    payload['accessToken'] = str(booking.access_token)
    return JsonResponse(payload, status=201)


@csrf_exempt
@require_http_methods(['GET', 'PATCH'])
def booking_detail(request, booking_id):
    if request.method == 'PATCH':
        return _update_booking(request, booking_id)

    try:
        booking = _load_visible_booking(request, booking_id)
    except BookingEngineError as exc:
        return error_response(exc)
    return JsonResponse(booking_payload(booking))


@role_required(ADMIN, STYLIST)
def _update_booking(request, booking_id):
    """
    PATCH /api/bookings/<id>/  {status? | stylistId? | date&time?, reason?}
    """
    body = parse_json_body(request)
    if body is None:
        return invalid_body_response()

    form = BookingUpdateForm(body)
    if not form.is_valid():
        return form_errors_response(form)
    d = form.cleaned_data
    changed_by = actor_label(request.user)

    admin_only = d.get('stylistId') or d.get('status') == BookingStatus.BOOKED
    if admin_only and request.actor_role != ADMIN:
        return JsonResponse(
            {'code': 'FORBIDDEN', 'detail': 'Only an admin can reassign or restore bookings.'},
            status=403,
        )

    try:
        if request.actor_role == STYLIST:
            # Stylists only change their own bookings
            current = ledger.get_booking(booking_id)
            if current.stylist.user_id != request.user.id:
                return JsonResponse(
                    {'code': 'FORBIDDEN', 'detail': 'You can only change your own bookings.'},
                    status=403,
                )

        if d.get('status'):
            booking = ledger.transition(booking_id, d['status'], changed_by, d.get('reason', ''))
        elif d.get('stylistId'):
            booking = ledger.reassign(booking_id, d['stylistId'], changed_by)
        else:
            booking = ledger.reschedule(booking_id, d['date'], d['time'], changed_by)
    except BookingEngineError as exc:
        return error_response(exc)

    return JsonResponse(booking_payload(booking))


@csrf_exempt
@require_POST
@role_required(ADMIN, STYLIST)
def add_payment(request, booking_id):
    """POST /api/bookings/<id>/payments/  {amount, method, gatewayRef?}"""
    body = parse_json_body(request)
    if body is None:
        return invalid_body_response()

    form = PaymentForm(body)
    if not form.is_valid():
        return form_errors_response(form)
    d = form.cleaned_data

    try:
        booking = ledger.add_payment(
            booking_id, d['amount'], d['method'],
            gateway_ref=d.get('gatewayRef') or None,
            recorded_by=actor_label(request.user),
        )
    except BookingEngineError as exc:
        return error_response(exc)

    return JsonResponse(booking_payload(booking), status=201)


@csrf_exempt
@require_POST
def check_in(request, booking_id):
    """POST /api/bookings/<id>/check-in/[?token=<access_token>]"""
    try:
        booking = _load_visible_booking(request, booking_id)
        booking = ledger.check_in(booking.id, changed_by=actor_label(request.user))
    except BookingEngineError as exc:
        return error_response(exc)
    return JsonResponse(booking_payload(booking))
