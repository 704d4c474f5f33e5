from django import forms


class StylistQueryForm(forms.Form):
    styleId = forms.UUIDField(required=False)


class ScheduleQueryForm(forms.Form):
    start = forms.DateField(input_formats=['%Y-%m-%d'], required=False)
    days = forms.IntegerField(min_value=1, max_value=31, required=False)
