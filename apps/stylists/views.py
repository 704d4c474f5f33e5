"""
Stylist API views.

  GET /api/stylists/?styleId=<uuid>                     who can do a style, with surcharge
  GET /api/stylists/<id>/schedule/?start=YYYY-MM-DD&days=7   week view (admin, or the stylist)
"""
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from apps.bookings import ledger
from apps.bookings.exceptions import NotFound
from apps.core.decorators import role_required
from apps.core.http import error_response, form_errors_response
from apps.core.roles import ADMIN, STYLIST
from apps.salon.calendar import salon_now
from apps.salon.config import load_salon_config
from apps.styles.models import Style

from .capability import eligible_stylists, surcharge_for
from .forms import ScheduleQueryForm, StylistQueryForm
from .models import Stylist


def _stylist_payload(stylist, style=None) -> dict:
    return {
        'id': str(stylist.id),
        'name': stylist.full_name,
        'skillLevel': stylist.skill_level,
        'bio': stylist.bio,
        'surcharge': str(surcharge_for(stylist, style)),
    }


@require_GET
def stylist_list(request):
    form = StylistQueryForm(request.GET)
    if not form.is_valid():
        return form_errors_response(form)
    style_id = form.cleaned_data.get('styleId')

    if style_id:
        style = Style.objects.filter(id=style_id, is_active=True).first()
        if style is None:
            return error_response(NotFound("Style not found."))
        stylists = eligible_stylists(style_id)
    else:
        style = None
        stylists = Stylist.objects.filter(is_active=True).order_by('full_name', 'id')

    return JsonResponse({
        'stylists': [_stylist_payload(s, style) for s in stylists],
        'count': len(stylists),
    })


@require_GET
@role_required(ADMIN, STYLIST)
def stylist_schedule(request, stylist_id):
    stylist = Stylist.objects.filter(id=stylist_id).first()
    if stylist is None:
        return error_response(NotFound("Stylist not found."))
    # Stylists only see their own week
    if request.actor_role == STYLIST and stylist.user_id != request.user.id:
        return JsonResponse(
            {'code': 'FORBIDDEN', 'detail': 'You can only view your own schedule.'},
            status=403,
        )

    form = ScheduleQueryForm(request.GET)
    if not form.is_valid():
        return form_errors_response(form)
    start = form.cleaned_data.get('start') or salon_now(load_salon_config()).date()
    days = form.cleaned_data.get('days') or 7

    schedule = ledger.stylist_schedule(stylist, start, days)
    return JsonResponse({
        'stylist': {'id': str(stylist.id), 'name': stylist.full_name},
        'start': start.isoformat(),
        'days': [
            {
                'date': day.isoformat(),
                'bookings': [
                    {
                        'id': str(b.id),
                        'reference': b.id_short,
                        'customerName': b.customer_name,
                        'style': b.style.name,
                        'variation': b.variation.name,
                        'time': b.start_time.strftime('%H:%M'),
                        'end': b.end_time.strftime('%H:%M'),
                        'status': b.status,
                    }
                    for b in bookings
                ],
            }
            for day, bookings in schedule.items()
        ],
    })
