"""
Booking API URLs (mounted under /api/).

  availability/                       Slot grid for style + variation (+ stylist) + date
  bookings/                           List bookings (GET), reserve with a confirmed deposit (POST)
  bookings/<uuid>/                    View / change status, stylist or time
  bookings/<uuid>/payments/           Record a balance or cash payment
  bookings/<uuid>/check-in/           Self check-in around the start time
"""
from django.urls import path
from . import views

app_name = 'bookings'

urlpatterns = [
    path('availability/',                         views.availability,    name='availability'),
    path('bookings/',                             views.bookings,        name='bookings'),
    path('bookings/<uuid:booking_id>/',           views.booking_detail,  name='detail'),
    path('bookings/<uuid:booking_id>/payments/',  views.add_payment,     name='payments'),
    path('bookings/<uuid:booking_id>/check-in/',  views.check_in,        name='check_in'),
]
