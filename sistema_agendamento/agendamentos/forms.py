import datetime

from django import forms
from .models import Client, Professional


class ClientForm(forms.ModelForm):
    class Meta:
        model = Client
        fields = ['name', 'email', 'phone', 'national_id']


class ProfessionalForm(forms.ModelForm):
    class Meta:
        model = Professional
        fields = ['name', 'specialty', 'registration']


class IsoDateTimeField(forms.DateTimeField):
    # JSON pode trazer número no lugar do texto ISO
    def to_python(self, value):
        if value not in self.empty_values and not isinstance(value, (str, datetime.datetime, datetime.date)):
            raise forms.ValidationError(self.error_messages['invalid'], code='invalid')
        return super().to_python(value)


class AppointmentForm(forms.Form):
    client_id = forms.IntegerField(min_value=1)
    professional_id = forms.IntegerField(min_value=1)
    scheduled_at = IsoDateTimeField()  # ISO datetime
    notes = forms.CharField(required=False)
