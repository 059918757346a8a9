"""Forms for the admin dashboard."""

from django import forms


class LoginForm(forms.Form):
    """Shared dashboard password."""

    password = forms.CharField(widget=forms.PasswordInput, strip=False)
    next = forms.CharField(widget=forms.HiddenInput, required=False)
