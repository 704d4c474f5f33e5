"""
Tests for the booking JSON API.
"""
import json
import uuid
from datetime import time, timedelta
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from apps.bookings.models import Booking, BookingStatus
from apps.payments.models import IntentStatus

from .factories import (
    TUESDAY,
    FakeGateway,
    at,
    make_booking,
    make_intent,
    make_salon,
    make_service,
    make_stylist,
)

User = get_user_model()


class ApiTestCase(TestCase):

    def setUp(self):
        make_salon()
        self.pricing = make_service('Box Braids', 'Medium', '150.00', 120)
        self.amara = make_stylist('Amara', [self.pricing.style])
        self.admin = User.objects.create_user('admin', password='pw', is_staff=True)
        self.stylist_user = User.objects.create_user('amara', password='pw')
        self.amara.user = self.stylist_user
        self.amara.save()
        self.customer = User.objects.create_user('nia', password='pw')

    def post_json(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def patch_json(self, url, data):
        return self.client.patch(url, data=json.dumps(data), content_type='application/json')

    def booking_body(self, **overrides):
        body = {
            'styleId': str(self.pricing.style_id),
            'variationId': str(self.pricing.variation_id),
            'date': TUESDAY.isoformat(),
            'time': '10:00',
            'customerInfo': {
                'fullName': 'Nia Johnson',
                'email': 'nia@example.com',
                'phone': '+1 555 010 2000',
                'smsConsent': True,
            },
            'paymentIntentId': str(make_intent().id),
        }
        body.update(overrides)
        return body


class AvailabilityViewTests(ApiTestCase):

    def url(self, **params):
        query = {
            'date': TUESDAY.isoformat(),
            'styleId': str(self.pricing.style_id),
            'variationId': str(self.pricing.variation_id),
        }
        query.update(params)
        return reverse('bookings:availability') + '?' + '&'.join(f'{k}={v}' for k, v in query.items())

    def test_returns_slot_grid(self):
        make_booking(self.pricing, self.amara, TUESDAY, time(10, 0))
        response = self.client.get(self.url())

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['date'], TUESDAY.isoformat())
        slots = {s['time']: s['available'] for s in data['slots']}
        self.assertFalse(slots['11:30'])
        self.assertTrue(slots['12:00'])

    def test_bad_date_is_validation_error(self):
        response = self.client.get(self.url(date='02/01/2035'))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'VALIDATION_ERROR')
        self.assertIn('date', response.json()['errors'])

    def test_unpriced_pair(self):
        response = self.client.get(self.url(variationId=uuid.uuid4()))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'INVALID_SERVICE')

    def test_unavailable_stylist(self):
        outsider = make_stylist('Olu', [])
        response = self.client.get(self.url(stylistId=outsider.id))
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'NO_ELIGIBLE_STYLIST')


class CreateBookingViewTests(ApiTestCase):

    def test_reserve(self):
        response = self.post_json(reverse('bookings:bookings'), self.booking_body())

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['status'], BookingStatus.BOOKED)
        self.assertEqual(data['stylist']['name'], 'Amara')
        self.assertEqual(data['price'], '150.00')
        self.assertEqual(data['balance']['amountDue'], '150.00')
        self.assertTrue(data['payments'][0]['isDeposit'])
        booking = Booking.objects.get()
        self.assertEqual(data['accessToken'], str(booking.access_token))
        self.assertIsNone(booking.customer)

    def test_signed_in_customer_is_linked(self):
        self.client.force_login(self.customer)
        self.post_json(reverse('bookings:bookings'), self.booking_body())
        self.assertEqual(Booking.objects.get().customer, self.customer)

    def test_unconfirmed_payment(self):
        intent = make_intent(status=IntentStatus.CREATED)
        with mock.patch('apps.payments.gateway.get_gateway', return_value=FakeGateway('pending')):
            response = self.post_json(
                reverse('bookings:bookings'), self.booking_body(paymentIntentId=str(intent.id)),
            )
        self.assertEqual(response.status_code, 402)
        self.assertEqual(response.json()['code'], 'PAYMENT_NOT_CONFIRMED')
        self.assertFalse(Booking.objects.exists())

    def test_slot_taken(self):
        make_booking(self.pricing, self.amara, TUESDAY, time(11, 0))
        response = self.post_json(reverse('bookings:bookings'), self.booking_body())
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'SLOT_NO_LONGER_AVAILABLE')

    def test_customer_contact_required(self):
        body = self.booking_body(customerInfo={'fullName': 'Nia Johnson'})
        response = self.post_json(reverse('bookings:bookings'), body)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'VALIDATION_ERROR')

    def test_malformed_body(self):
        response = self.client.post(reverse('bookings:bookings'), data='[1, 2', content_type='application/json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'INVALID_BODY')


class BookingListViewTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.jada = make_stylist('Jada', [self.pricing.style])
        self.mine = make_booking(
            self.pricing, self.amara, TUESDAY, time(10, 0),
            customer=self.customer, customer_name='Nia Johnson',
        )
        self.theirs = make_booking(self.pricing, self.jada, TUESDAY, time(14, 0), customer_name='Zuri Bello')
        self.later = make_booking(
            self.pricing, self.amara, TUESDAY + timedelta(days=1), time(9, 0),
            status=BookingStatus.CANCELLED,
        )
        self.url = reverse('bookings:bookings')

    def ids(self, response):
        return [b['id'] for b in response.json()['bookings']]

    def test_guest_must_sign_in(self):
        self.assertEqual(self.client.get(self.url).status_code, 401)

    def test_customer_sees_only_own_bookings(self):
        self.client.force_login(self.customer)
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.ids(response), [str(self.mine.id)])
        self.assertEqual(response.json()['bookings'][0]['balance']['amountDue'], '200.00')

    def test_customer_filter_cannot_widen_the_list(self):
        self.client.force_login(self.customer)
        response = self.client.get(self.url, {'stylistId': str(self.jada.id)})
        self.assertEqual(self.ids(response), [])

    def test_admin_sees_everything_newest_first(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url)
        self.assertEqual(
            self.ids(response), [str(self.later.id), str(self.theirs.id), str(self.mine.id)],
        )
        self.assertEqual(response.json()['count'], 3)

    def test_staff_filters(self):
        self.client.force_login(self.stylist_user)
        by_date = self.client.get(self.url, {'date': TUESDAY.isoformat()})
        self.assertEqual(set(self.ids(by_date)), {str(self.mine.id), str(self.theirs.id)})

        by_status = self.client.get(self.url, {'status': 'cancelled'})
        self.assertEqual(self.ids(by_status), [str(self.later.id)])

        by_stylist = self.client.get(self.url, {'stylistId': str(self.jada.id)})
        self.assertEqual(self.ids(by_stylist), [str(self.theirs.id)])

        by_search = self.client.get(self.url, {'q': 'zuri'})
        self.assertEqual(self.ids(by_search), [str(self.theirs.id)])

    def test_bad_filter(self):
        self.client.force_login(self.admin)
        response = self.client.get(self.url, {'status': 'lost'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('status', response.json()['errors'])


class BookingDetailViewTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.booking = make_booking(self.pricing, self.amara, TUESDAY, time(10, 0), customer=self.customer)
        self.url = reverse('bookings:detail', args=[self.booking.id])

    def test_guest_without_token_sees_nothing(self):
        self.assertEqual(self.client.get(self.url).status_code, 404)

    def test_token_grants_access(self):
        response = self.client.get(f'{self.url}?token={self.booking.access_token}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['reference'], self.booking.id_short)

    def test_owner_and_staff_can_view(self):
        for user in (self.customer, self.admin, self.stylist_user):
            self.client.force_login(user)
            self.assertEqual(self.client.get(self.url).status_code, 200, user.username)

    def test_patch_requires_sign_in(self):
        response = self.patch_json(self.url, {'status': 'cancelled'})
        self.assertEqual(response.status_code, 401)

    def test_customer_cannot_patch(self):
        self.client.force_login(self.customer)
        response = self.patch_json(self.url, {'status': 'cancelled'})
        self.assertEqual(response.status_code, 403)

    def test_stylist_cancels(self):
        self.client.force_login(self.stylist_user)
        response = self.patch_json(self.url, {'status': 'cancelled', 'reason': 'Stylist unwell'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'cancelled')
        log = self.booking.status_logs.get()
        self.assertEqual((log.changed_by, log.reason), ('amara', 'Stylist unwell'))

    def test_only_admin_restores(self):
        self.client.force_login(self.stylist_user)
        self.patch_json(self.url, {'status': 'cancelled'})
        self.assertEqual(self.patch_json(self.url, {'status': 'booked'}).status_code, 403)

        self.client.force_login(self.admin)
        response = self.patch_json(self.url, {'status': 'booked'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'booked')

    def test_invalid_transition(self):
        self.client.force_login(self.admin)
        response = self.patch_json(self.url, {'status': 'completed'})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'INVALID_TRANSITION')

    def test_reschedule(self):
        self.client.force_login(self.stylist_user)
        response = self.patch_json(self.url, {'date': TUESDAY.isoformat(), 'time': '15:00'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual((response.json()['time'], response.json()['end']), ('15:00', '17:00'))

    def test_stylist_cannot_change_a_colleagues_booking(self):
        jada_user = User.objects.create_user('jada', password='pw')
        make_stylist('Jada', [self.pricing.style], user=jada_user)
        self.client.force_login(jada_user)

        self.assertEqual(self.patch_json(self.url, {'status': 'cancelled'}).status_code, 403)
        response = self.patch_json(self.url, {'date': TUESDAY.isoformat(), 'time': '15:00'})
        self.assertEqual(response.status_code, 403)
        self.booking.refresh_from_db()
        self.assertEqual((self.booking.status, self.booking.start_time), (BookingStatus.BOOKED, time(10, 0)))
        # Reading it is still allowed
        self.assertEqual(self.client.get(self.url).status_code, 200)

    def test_admin_reassigns(self):
        jada = make_stylist('Jada', [self.pricing.style])
        self.client.force_login(self.stylist_user)
        self.assertEqual(self.patch_json(self.url, {'stylistId': str(jada.id)}).status_code, 403)

        self.client.force_login(self.admin)
        response = self.patch_json(self.url, {'stylistId': str(jada.id)})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['stylist']['name'], 'Jada')

    def test_one_change_per_request(self):
        self.client.force_login(self.admin)
        response = self.patch_json(self.url, {'status': 'cancelled', 'time': '15:00'})
        self.assertEqual(response.status_code, 400)


class PaymentViewTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.booking = make_booking(self.pricing, self.amara, TUESDAY, time(10, 0))
        self.url = reverse('bookings:payments', args=[self.booking.id])

    def test_staff_records_cash(self):
        self.client.force_login(self.admin)
        response = self.post_json(self.url, {'amount': '150.00', 'method': 'cash'})
        self.assertEqual(response.status_code, 201)
        # Inserted directly, so no deposit payment: 150 + 50 - 150
        self.assertEqual(response.json()['balance']['amountDue'], '50.00')
        self.assertEqual(response.json()['status'], 'booked')

    def test_guest_cannot_record_payments(self):
        self.assertEqual(self.post_json(self.url, {'amount': '10', 'method': 'cash'}).status_code, 401)

    def test_gateway_payment_needs_reference(self):
        self.client.force_login(self.admin)
        response = self.post_json(self.url, {'amount': '150.00', 'method': 'gateway'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('gatewayRef', response.json()['errors'])

    def test_non_positive_amount(self):
        self.client.force_login(self.admin)
        response = self.post_json(self.url, {'amount': '0', 'method': 'cash'})
        self.assertEqual(response.status_code, 400)


class CheckInViewTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.booking = make_booking(self.pricing, self.amara, TUESDAY, time(10, 0))
        self.url = reverse('bookings:check_in', args=[self.booking.id])

    def test_check_in_with_token_inside_window(self):
        with mock.patch('django.utils.timezone.now', return_value=at(TUESDAY, 9, 45)):
            response = self.client.post(f'{self.url}?token={self.booking.access_token}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'checked_in')

    def test_window_closed(self):
        with mock.patch('django.utils.timezone.now', return_value=at(TUESDAY, 9, 0)):
            response = self.client.post(f'{self.url}?token={self.booking.access_token}')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'CHECK_IN_WINDOW_CLOSED')

    def test_wrong_token(self):
        response = self.client.post(f'{self.url}?token={uuid.uuid4()}')
        self.assertEqual(response.status_code, 404)
