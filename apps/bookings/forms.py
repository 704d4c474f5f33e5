"""
Request validation for the booking API.

Field names match the JSON keys clients send, so `form.errors` can be
returned as-is.
"""
from decimal import Decimal

from django import forms

from apps.payments.models import PaymentMethod
from .models import BookingStatus

DATE_FORMATS = ['%Y-%m-%d']
TIME_FORMATS = ['%H:%M']


class AvailabilityQueryForm(forms.Form):
    date = forms.DateField(input_formats=DATE_FORMATS)
    styleId = forms.UUIDField()
    variationId = forms.UUIDField()
    stylistId = forms.UUIDField(required=False)
    excludeBookingId = forms.UUIDField(required=False)


class BookingListQueryForm(forms.Form):
    date = forms.DateField(input_formats=DATE_FORMATS, required=False)
    dateFrom = forms.DateField(input_formats=DATE_FORMATS, required=False)
    dateTo = forms.DateField(input_formats=DATE_FORMATS, required=False)
    status = forms.ChoiceField(choices=BookingStatus.choices, required=False)
    stylistId = forms.UUIDField(required=False)
    q = forms.CharField(max_length=120, required=False)


class CustomerInfoForm(forms.Form):
    fullName = forms.CharField(max_length=120)
    email = forms.EmailField(required=False)
    phone = forms.CharField(max_length=30, required=False)
    smsConsent = forms.BooleanField(required=False)

    def clean_phone(self):
        phone = self.cleaned_data.get('phone', '').strip()
        digits = ''.join(ch for ch in phone if ch.isdigit())
        if phone and not 7 <= len(digits) <= 15:
            raise forms.ValidationError("Please enter a valid phone number.")
        return phone

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get('email') and not cleaned.get('phone'):
            raise forms.ValidationError("Please give an email address or a phone number.")
        return cleaned

    def to_customer_info(self) -> dict:
        d = self.cleaned_data
        return {
            'full_name': d['fullName'],
            'email': d.get('email', ''),
            'phone': d.get('phone', ''),
            'sms_consent': d.get('smsConsent', False),
        }


class ReserveForm(forms.Form):
    styleId = forms.UUIDField()
    variationId = forms.UUIDField()
    stylistId = forms.UUIDField(required=False)
    date = forms.DateField(input_formats=DATE_FORMATS)
    time = forms.TimeField(input_formats=TIME_FORMATS)
    paymentIntentId = forms.UUIDField()
    promoId = forms.UUIDField(required=False)
    notes = forms.CharField(max_length=500, required=False)


class BookingUpdateForm(forms.Form):
    """
    Exactly one change per request: a status, a stylist, or a date + time.
    """
    status = forms.ChoiceField(choices=BookingStatus.choices, required=False)
    stylistId = forms.UUIDField(required=False)
    date = forms.DateField(input_formats=DATE_FORMATS, required=False)
    time = forms.TimeField(input_formats=TIME_FORMATS, required=False)
    reason = forms.CharField(max_length=500, required=False)

    def clean(self):
        cleaned = super().clean()
        has_date, has_time = bool(cleaned.get('date')), bool(cleaned.get('time'))
        if has_date != has_time:
            raise forms.ValidationError("Send date and time together to reschedule.")

        changes = [
            bool(cleaned.get('status')),
            bool(cleaned.get('stylistId')),
            has_date and has_time,
        ]
        if sum(changes) != 1:
            raise forms.ValidationError("Send exactly one of: status, stylistId, or date and time.")
        return cleaned


class PaymentForm(forms.Form):
    amount = forms.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    method = forms.ChoiceField(choices=PaymentMethod.choices)
    gatewayRef = forms.CharField(max_length=100, required=False)

    def clean(self):
        cleaned = super().clean()
        if cleaned.get('method') == PaymentMethod.GATEWAY and not cleaned.get('gatewayRef'):
            self.add_error('gatewayRef', "Gateway payments need the gateway reference.")
        return cleaned
