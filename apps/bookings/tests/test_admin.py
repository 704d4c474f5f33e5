"""
Bookings admin: rows are never created or removed from the admin.
"""
from datetime import time

from django.contrib.admin.sites import AdminSite
from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase

from apps.bookings.admin import BookingAdmin
from apps.bookings.models import Booking, BookingStatus

from .factories import TUESDAY, make_booking, make_salon, make_service, make_stylist


class BookingAdminTests(TestCase):

    def setUp(self):
        make_salon()
        pricing = make_service()
        self.booking = make_booking(pricing, make_stylist('Amara', [pricing.style]), TUESDAY, time(10, 0))
        self.request = RequestFactory().get('/admin/bookings/booking/')
        self.request.user = get_user_model().objects.create_superuser('root', 'root@example.com', 'pw')
        self.model_admin = BookingAdmin(Booking, AdminSite())

    def test_no_add_or_delete(self):
        self.assertFalse(self.model_admin.has_add_permission(self.request))
        self.assertFalse(self.model_admin.has_delete_permission(self.request))
        self.assertFalse(self.model_admin.has_delete_permission(self.request, self.booking))
        self.assertNotIn('delete_selected', self.model_admin.get_actions(self.request))

    def test_cancel_action_goes_through_status_machine(self):
        self.model_admin.message_user = lambda *args, **kwargs: None
        self.model_admin.cancel_bookings(self.request, Booking.objects.all())

        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, BookingStatus.CANCELLED)
        self.assertEqual(self.booking.status_logs.get().changed_by, 'root')
