"""
Tests for the payment intent API.
"""
import json
import uuid
from datetime import time
from unittest import mock

from django.test import TestCase, override_settings
from django.urls import reverse

from apps.bookings.tests.factories import (
    TUESDAY,
    FakeGateway,
    make_booking,
    make_intent,
    make_salon,
    make_service,
    make_stylist,
)
from apps.payments.exceptions import PaymentFailed
from apps.payments.models import IntentPurpose, IntentStatus, PaymentIntent


@override_settings(RAZORPAY_KEY_ID='rzp_test_key')
class CreateIntentViewTests(TestCase):

    def setUp(self):
        make_salon(deposit='50.00')
        self.gateway = FakeGateway()
        patcher = mock.patch('apps.payments.gateway.get_gateway', return_value=self.gateway)
        patcher.start()
        self.addCleanup(patcher.stop)

    def post_json(self, data):
        return self.client.post(
            reverse('payments:create_intent'), data=json.dumps(data), content_type='application/json',
        )

    def test_deposit_intent(self):
        response = self.post_json({})

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['purpose'], IntentPurpose.DEPOSIT)
        self.assertEqual(data['status'], IntentStatus.CREATED)
        self.assertEqual((data['deposit'], data['processingFee'], data['amount']), ('50.00', '1.75', '51.75'))
        self.assertEqual(data['amountMinorUnits'], 5175)
        self.assertEqual(data['gatewayKeyId'], 'rzp_test_key')
        self.assertEqual(data['gatewayOrderId'], self.gateway.created[0]['id'])
        self.assertEqual(self.gateway.created[0]['amount'], 5175)

    def test_balance_intent_needs_booking_and_amount(self):
        response = self.post_json({'purpose': 'balance'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(set(response.json()['errors']), {'bookingId', 'amount'})

    def test_balance_intent_with_token(self):
        pricing = make_service()
        booking = make_booking(pricing, make_stylist('Amara', [pricing.style]), TUESDAY, time(10, 0))
        url = f"{reverse('payments:create_intent')}?token={booking.access_token}"
        response = self.client.post(
            url,
            data=json.dumps({'purpose': 'balance', 'bookingId': str(booking.id), 'amount': '150.00'}),
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 201)
        intent = PaymentIntent.objects.get()
        self.assertEqual(intent.booking, booking)
        self.assertEqual(intent.amount_minor_units, 15000)
        self.assertEqual(self.gateway.created[0]['notes']['booking_id'], str(booking.id))

    def test_balance_intent_hidden_without_access(self):
        pricing = make_service()
        booking = make_booking(pricing, make_stylist('Amara', [pricing.style]), TUESDAY, time(10, 0))
        response = self.post_json({'purpose': 'balance', 'bookingId': str(booking.id), 'amount': '150.00'})
        self.assertEqual(response.status_code, 404)
        self.assertFalse(PaymentIntent.objects.exists())

    def test_gateway_rejection(self):
        failing = mock.Mock()
        failing.create_order.side_effect = PaymentFailed('Authentication failed')
        with mock.patch('apps.payments.gateway.get_gateway', return_value=failing):
            response = self.post_json({})

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json(), {'code': 'PAYMENT_FAILED', 'detail': 'Authentication failed'})
        self.assertFalse(PaymentIntent.objects.exists())


class ConfirmIntentViewTests(TestCase):

    def setUp(self):
        make_salon()

    def url(self, intent_id):
        return reverse('payments:confirm_intent', args=[intent_id])

    def test_confirm_asks_gateway(self):
        intent = make_intent(status=IntentStatus.CREATED)
        gateway = FakeGateway('succeeded')
        with mock.patch('apps.payments.gateway.get_gateway', return_value=gateway):
            response = self.client.post(self.url(intent.id))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], IntentStatus.SUCCEEDED)
        self.assertEqual(gateway.status_checks, [intent.gateway_order_id])

    def test_pending_payment(self):
        intent = make_intent(status=IntentStatus.CREATED)
        with mock.patch('apps.payments.gateway.get_gateway', return_value=FakeGateway('pending')):
            response = self.client.post(self.url(intent.id))
        self.assertEqual(response.json()['status'], IntentStatus.PENDING)

    def test_unknown_intent(self):
        self.assertEqual(self.client.post(self.url(uuid.uuid4())).status_code, 404)
