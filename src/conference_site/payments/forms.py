"""Forms for the payments app."""

from decimal import Decimal

from django import forms

from conference_site.payments.services.checkout import CheckoutContact, ShirtItem
from conference_site.settings import SHIRT_SIZES, get_config


class DonationForm(forms.Form):
    """A one-off donation entered on the donate page."""

    amount = forms.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.01"),
        label="Amount (USD)",
    )
    name = forms.CharField(max_length=200, required=False)
    email = forms.EmailField(required=False)
    note = forms.CharField(widget=forms.Textarea(attrs={"rows": 3}), required=False)

    def clean_note(self) -> str:
        """Trim the note to the length Stripe shows on the checkout page."""
        return self.cleaned_data.get("note", "")[: get_config().donations.note_max_length]


class MerchOrderForm(forms.Form):
    """A t-shirt order placed from the merch page."""

    name = forms.CharField(max_length=200, required=False)
    email = forms.EmailField(required=False)
    phone = forms.CharField(max_length=50, required=False)
    size = forms.ChoiceField(choices=[(size, size) for size in SHIRT_SIZES], initial="M")
    quantity = forms.IntegerField(min_value=1, initial=1)

    def clean_quantity(self) -> int:
        """Cap the quantity at the configured maximum."""
        quantity = self.cleaned_data["quantity"]
        maximum = get_config().merch.max_quantity
        if quantity > maximum:
            raise forms.ValidationError(f"You can order at most {maximum} shirts at once.")
        return quantity

    def shirts(self) -> list[ShirtItem]:
        """Return one :class:`ShirtItem` per ordered shirt."""
        data = self.cleaned_data
        return [ShirtItem(size=data["size"], attendee_name=data.get("name", "")) for _ in range(data["quantity"])]

    def contact(self) -> CheckoutContact:
        """Return the contact details for the checkout session."""
        data = self.cleaned_data
        return CheckoutContact(name=data.get("name", ""), email=data.get("email", ""), phone=data.get("phone", ""))
