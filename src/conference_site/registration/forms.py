"""Forms for the registration app."""

from django import forms

from conference_site.registration.models import ShirtSize
from conference_site.registration.services.registration import RegistrationSubmission

_SHIRT_CHOICES = [("", "Select T-Shirt Size"), *ShirtSize.choices]


class RegistrationForm(forms.Form):
    """Primary contact details for a registration."""

    contact_name = forms.CharField(max_length=200, label="Full name")
    contact_phone = forms.CharField(max_length=50, label="Phone")
    contact_email = forms.EmailField(label="Email")
    contact_address = forms.CharField(max_length=500, required=False, label="Address")
    prayer_request = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}), required=False)
    primary_wants_shirt = forms.BooleanField(required=False, label="I want a conference t-shirt")
    primary_shirt_size = forms.ChoiceField(choices=_SHIRT_CHOICES, required=False, label="T-shirt size")

    def clean(self) -> dict:
        """Require a shirt size when the contact asks for a shirt."""
        cleaned = super().clean()
        if cleaned.get("primary_wants_shirt") and not cleaned.get("primary_shirt_size"):
            self.add_error("primary_shirt_size", "Choose a size for your t-shirt.")
        return cleaned

    def to_submission(self, attendees: list[dict[str, object]]) -> RegistrationSubmission:
        """Build a service submission from the validated data.

        Args:
            attendees: Cleaned rows from the attendee formset.
        """
        data = self.cleaned_data
        return RegistrationSubmission(
            contact_name=data["contact_name"],
            contact_phone=data["contact_phone"],
            contact_email=data["contact_email"],
            contact_address=data.get("contact_address", ""),
            prayer_request=data.get("prayer_request", ""),
            attendees=tuple(attendees),
            primary_wants_shirt=bool(data.get("primary_wants_shirt")),
            primary_shirt_size=data.get("primary_shirt_size", ""),
        )


class AttendeeForm(forms.Form):
    """An additional attendee on a registration."""

    name = forms.CharField(max_length=200, required=False)
    phone = forms.CharField(max_length=50, required=False)
    email = forms.EmailField(required=False)
    address = forms.CharField(max_length=500, required=False)
    shirt_size = forms.ChoiceField(choices=_SHIRT_CHOICES, required=False)
    notes = forms.CharField(widget=forms.Textarea(attrs={"rows": 2}), required=False)


AttendeeFormSet = forms.formset_factory(AttendeeForm, extra=1, max_num=20, validate_max=True)


class DuplicateCheckForm(forms.Form):
    """Email and/or phone to look up before submitting a registration."""

    email = forms.CharField(max_length=254, required=False, strip=True)
    phone = forms.CharField(max_length=50, required=False, strip=True)

    def clean(self) -> dict:
        """Require at least one of email or phone."""
        cleaned = super().clean()
        if not cleaned.get("email") and not cleaned.get("phone"):
            raise forms.ValidationError("Email or phone is required")
        return cleaned
