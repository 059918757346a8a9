"""Views for the payments app.

JSON endpoints start Stripe Checkout Sessions for the site's front-end; the
HTML donate and merch pages post a form and redirect to the hosted checkout.
Nothing is recorded until the Stripe webhook reports a completed session.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import stripe
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from conference_site.features import FeatureRequiredMixin
from conference_site.http import InvalidJSONBodyError, json_body, json_error
from conference_site.payments.forms import DonationForm, MerchOrderForm
from conference_site.payments.services.checkout import (
    CheckoutConfigurationError,
    CheckoutContact,
    normalize_shirt_order,
    parse_donation_amount,
    start_donation_checkout,
    start_shirt_checkout,
    tee_pricing_configured,
)
from conference_site.payments.stripe_client import StripeNotConfiguredError
from conference_site.settings import get_config

if TYPE_CHECKING:
    from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

MISSING_TEE_PRICE = "Missing STRIPE_TEE_PRICE_ID or STRIPE_TEE_PRICE_CENTS in environment"


def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


@method_decorator(csrf_exempt, name="dispatch")
class DonationCheckoutView(FeatureRequiredMixin, View):
    """``POST /api/checkout/donation/``: start a donation checkout.

    Body: ``{"amount": "25", "name"?, "email"?, "note"?}`` with the amount in
    dollars. Responds ``{"url": ...}`` with the hosted checkout URL.
    """

    required_feature = "donations"
    http_method_names = ["post"]

    def post(self, request: HttpRequest) -> JsonResponse:
        """Validate the amount and create the Stripe session."""
        try:
            body = json_body(request)
        except InvalidJSONBodyError:
            return json_error("Invalid JSON body", status=400)

        try:
            amount = parse_donation_amount(body.get("amount"))
        except ValidationError:
            return json_error("Invalid amount", status=400)

        note = _text(body.get("note"))[: get_config().donations.note_max_length]
        try:
            url = start_donation_checkout(
                amount,
                name=_text(body.get("name")),
                email=_text(body.get("email")),
                note=note,
            )
        except (StripeNotConfiguredError, stripe.StripeError):
            logger.exception("Donation checkout failed")
            return json_error("Unable to create donation session", status=500)
        return JsonResponse({"url": url})


@method_decorator(csrf_exempt, name="dispatch")
class ShirtCheckoutView(FeatureRequiredMixin, View):
    """``POST /api/checkout/shirt/``: start a t-shirt checkout.

    Body: ``{"shirts"?: [{"size", "attendeeName"}], "contact"?: {"name",
    "email", "phone"}, "registrationId"?, "primaryShirtSize"?}``. A body that
    cannot be parsed is treated as empty, which orders one shirt in the
    default size.
    """

    required_feature = "merch"
    http_method_names = ["post"]

    def post(self, request: HttpRequest) -> JsonResponse:
        """Normalize the order and create the Stripe session."""
        if not tee_pricing_configured():
            return json_error(MISSING_TEE_PRICE, status=400)

        try:
            body = json_body(request)
        except InvalidJSONBodyError:
            body = {}

        raw_contact = body.get("contact")
        raw_contact = raw_contact if isinstance(raw_contact, dict) else {}
        contact = CheckoutContact(
            name=_text(raw_contact.get("name")),
            email=_text(raw_contact.get("email")),
            phone=_text(raw_contact.get("phone")),
        )
        raw_shirts = body.get("shirts")
        shirts = normalize_shirt_order(
            raw_shirts if isinstance(raw_shirts, list) else None,
            primary_shirt_size=body.get("primaryShirtSize"),
            contact_name=contact.name,
        )

        try:
            url = start_shirt_checkout(shirts, contact=contact, registration_id=body.get("registrationId"))
        except (CheckoutConfigurationError, StripeNotConfiguredError, stripe.StripeError):
            logger.exception("Shirt checkout failed")
            return json_error("Unable to create checkout session", status=500)
        return JsonResponse({"url": url})


class DonateView(FeatureRequiredMixin, View):
    """Donation page: a form that redirects to Stripe Checkout."""

    required_feature = "donations"
    template_name = "conference_site/payments/donate.html"

    def get(self, request: HttpRequest) -> HttpResponse:
        """Render an empty donation form."""
        return render(request, self.template_name, {"form": DonationForm()})

    def post(self, request: HttpRequest) -> HttpResponse:
        """Start the donation checkout, or re-render the form with errors."""
        form = DonationForm(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, {"form": form}, status=400)

        data = form.cleaned_data
        try:
            url = start_donation_checkout(
                data["amount"],
                name=data.get("name", ""),
                email=data.get("email", ""),
                note=data.get("note", ""),
            )
        except (StripeNotConfiguredError, stripe.StripeError):
            logger.exception("Donation checkout failed")
            messages.error(request, "We could not start the donation checkout. Please try again.")
            return render(request, self.template_name, {"form": form}, status=500)
        return redirect(url)


class MerchView(FeatureRequiredMixin, View):
    """Merch page: pick a size and quantity, then pay on Stripe Checkout."""

    required_feature = "merch"
    template_name = "conference_site/payments/merch.html"

    def _context(self, form: MerchOrderForm) -> dict[str, object]:
        merch = get_config().merch
        return {
            "form": form,
            "merch": merch,
            "available": tee_pricing_configured(),
            "price": (merch.tee_price_cents or merch.default_price_cents) / 100,
        }

    def get(self, request: HttpRequest) -> HttpResponse:
        """Render the order form, prefilled from the query string."""
        initial = {key: request.GET[key] for key in ("name", "email", "phone", "size") if request.GET.get(key)}
        return render(request, self.template_name, self._context(MerchOrderForm(initial=initial)))

    def post(self, request: HttpRequest) -> HttpResponse:
        """Start the shirt checkout, or re-render the form with errors."""
        form = MerchOrderForm(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, self._context(form), status=400)
        if not tee_pricing_configured():
            messages.error(request, "Shirts are not available right now.")
            return render(request, self.template_name, self._context(form), status=400)

        try:
            url = start_shirt_checkout(form.shirts(), contact=form.contact())
        except (CheckoutConfigurationError, StripeNotConfiguredError, stripe.StripeError):
            logger.exception("Shirt checkout failed")
            messages.error(request, "We could not start the checkout. Please try again.")
            return render(request, self.template_name, self._context(form), status=500)
        return redirect(url)
