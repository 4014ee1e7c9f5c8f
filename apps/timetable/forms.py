"""Timetable forms: validation for session and weekly slot input."""
from django import forms
from .models import ServiceSession, TimeSlotTemplate


class ServiceSessionForm(forms.ModelForm):
    class Meta:
        model = ServiceSession
        fields = ['name', 'description', 'theme_color', 'slots', 'is_active']

    def clean_name(self):
        name = (self.cleaned_data.get('name') or '').strip()
        if not name:
            raise forms.ValidationError('Name is required.')
        return name


class TimeSlotTemplateForm(forms.ModelForm):
    """Field validators cover HH:mm format and weekday range; model.clean() checks ordering."""
    class Meta:
        model = TimeSlotTemplate
        fields = ['day_of_week', 'start_time', 'end_time']
