from decimal import Decimal

from django import forms

from .models import IntentPurpose


class IntentForm(forms.Form):
    purpose = forms.ChoiceField(choices=IntentPurpose.choices, required=False)
    bookingId = forms.UUIDField(required=False)
    amount = forms.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'), required=False)

    def clean(self):
        cleaned = super().clean()
        cleaned['purpose'] = cleaned.get('purpose') or IntentPurpose.DEPOSIT
        if cleaned['purpose'] == IntentPurpose.BALANCE:
            if not cleaned.get('bookingId'):
                self.add_error('bookingId', "A balance payment needs its booking.")
            if not cleaned.get('amount'):
                self.add_error('amount', "A balance payment needs an amount.")
        return cleaned
