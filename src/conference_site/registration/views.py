"""Views for the registration app.

The HTML registration page uses Django forms; the JSON endpoints serve the
site's front-end with the camelCase payloads it posts.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import stripe
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from conference_site.features import FeatureRequiredMixin, is_feature_enabled
from conference_site.http import InvalidJSONBodyError, json_body, json_error
from conference_site.payments.services.checkout import (
    CheckoutConfigurationError,
    CheckoutContact,
    normalize_shirt_order,
    start_shirt_checkout,
    tee_pricing_configured,
)
from conference_site.payments.stripe_client import StripeNotConfiguredError
from conference_site.registration.forms import AttendeeFormSet, DuplicateCheckForm, RegistrationForm
from conference_site.registration.serializers import serialize_registration
from conference_site.registration.services.duplicates import DUPLICATE_MESSAGE, check_duplicate
from conference_site.registration.services.registration import (
    DuplicateRegistrationError,
    RegistrationService,
    RegistrationSubmission,
)

if TYPE_CHECKING:
    from django.http import HttpRequest, HttpResponse

    from conference_site.registration.models import Registration

logger = logging.getLogger(__name__)

REGISTRATION_SESSION_KEY = "conference_site_registration_id"


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""


def submission_from_json(body: dict[str, object]) -> RegistrationSubmission:
    """Build a :class:`RegistrationSubmission` from the front-end's JSON body."""
    attendees = body.get("attendees")
    return RegistrationSubmission(
        contact_name=_text(body.get("contactName")),
        contact_phone=_text(body.get("contactPhone")),
        contact_email=_text(body.get("contactEmail")),
        contact_address=_text(body.get("contactAddress")),
        prayer_request=_text(body.get("prayerRequest")),
        attendees=tuple(row for row in attendees if isinstance(row, dict)) if isinstance(attendees, list) else (),
        primary_wants_shirt=bool(body.get("primaryWantsShirt")),
        primary_shirt_size=_text(body.get("primaryShirtSize")),
    )


def _thank_you_url() -> str:
    return f"{reverse('pages:thank-you')}?poll=1"


@method_decorator(csrf_exempt, name="dispatch")
class RegisterAPIView(FeatureRequiredMixin, View):
    """``POST /api/register/``: create a registration from JSON.

    Returns ``{"success": true, "registration": {...}}``, with
    ``"duplicate": true`` when an existing registration answered the
    submission.
    """

    required_feature = "registration"
    http_method_names = ["post"]

    def post(self, request: HttpRequest) -> JsonResponse:
        """Validate and persist the submission."""
        try:
            body = json_body(request)
        except InvalidJSONBodyError:
            return json_error("Invalid JSON body", status=400)

        try:
            result = RegistrationService.register(submission_from_json(body))
        except ValidationError as exc:
            return json_error(exc.messages[0], status=400)
        except DuplicateRegistrationError as exc:
            return json_error("Already registered", status=409, duplicate=True, field=exc.field_name)
        except Exception:  # noqa: BLE001
            logger.exception("Registration failed")
            return json_error("Registration failed", status=500)

        payload: dict[str, object] = {"success": True, "registration": serialize_registration(result.registration)}
        if result.duplicate:
            payload["duplicate"] = True
        return JsonResponse(payload)


@method_decorator(csrf_exempt, name="dispatch")
class CheckDuplicateView(FeatureRequiredMixin, View):
    """``POST /api/check-duplicate/``: look up an existing registration.

    Body: ``{"email"?, "phone"?}``. At least one must be non-empty.
    """

    required_feature = "registration"
    http_method_names = ["post"]

    def post(self, request: HttpRequest) -> JsonResponse:
        """Return the duplicate lookup result."""
        try:
            body = json_body(request)
        except InvalidJSONBodyError:
            return json_error("Invalid JSON body", status=400)

        form = DuplicateCheckForm({"email": _text(body.get("email")), "phone": _text(body.get("phone"))})
        if not form.is_valid():
            return json_error("Email or phone is required", status=400)

        result = check_duplicate(form.cleaned_data["email"] or None, form.cleaned_data["phone"] or None)
        return JsonResponse(result.as_json())


class RegisterView(FeatureRequiredMixin, View):
    """Registration page: contact details plus any additional attendees.

    After a successful registration the browser is sent to the shirt
    checkout when the primary contact asked for a shirt, otherwise to the
    thank-you page.
    """

    required_feature = "registration"
    template_name = "conference_site/registration/register.html"

    def _render(
        self,
        request: HttpRequest,
        form: RegistrationForm,
        formset: AttendeeFormSet,
        *,
        status: int = 200,
        duplicate: Registration | None = None,
    ) -> HttpResponse:
        context = {
            "form": form,
            "formset": formset,
            "duplicate": duplicate,
            "duplicate_message": DUPLICATE_MESSAGE,
            "checkout_cancelled": request.GET.get("checkout") == "cancelled",
        }
        return render(request, self.template_name, context, status=status)

    def get(self, request: HttpRequest) -> HttpResponse:
        """Render the empty registration form."""
        return self._render(request, RegistrationForm(), AttendeeFormSet(prefix="attendees"))

    def post(self, request: HttpRequest) -> HttpResponse:
        """Validate the forms and register."""
        form = RegistrationForm(request.POST)
        formset = AttendeeFormSet(request.POST, prefix="attendees")
        if not (form.is_valid() and formset.is_valid()):
            return self._render(request, form, formset, status=400)

        attendees = [row for row in formset.cleaned_data if row]
        submission = form.to_submission(attendees)
        try:
            result = RegistrationService.register(submission)
        except ValidationError as exc:
            form.add_error(None, exc)
            return self._render(request, form, formset, status=400)
        except DuplicateRegistrationError:
            form.add_error("contact_email", "This email is already registered.")
            return self._render(request, form, formset, status=409)

        if result.duplicate:
            return self._render(request, form, formset, duplicate=result.registration)

        request.session[REGISTRATION_SESSION_KEY] = result.registration.pk
        if submission.primary_wants_shirt and is_feature_enabled("merch"):
            return self._redirect_to_shirt_checkout(request, result.registration, submission)
        messages.success(request, "Registration successful! A confirmation email has been sent.")
        return redirect(_thank_you_url())

    def _redirect_to_shirt_checkout(
        self,
        request: HttpRequest,
        registration: Registration,
        submission: RegistrationSubmission,
    ) -> HttpResponse:
        """Send the browser to Stripe for the group's shirts."""
        if not tee_pricing_configured():
            messages.info(request, "You're registered! Shirts are not available online right now.")
            return redirect(_thank_you_url())

        rows = [
            {"size": attendee.shirt_size, "attendeeName": attendee.name}
            for attendee in registration.attendees.all()
            if attendee.shirt_size
        ]
        shirts = normalize_shirt_order(
            rows,
            primary_shirt_size=submission.primary_shirt_size,
            contact_name=registration.contact_name,
        )
        contact = CheckoutContact(
            name=registration.contact_name,
            email=registration.contact_email,
            phone=registration.contact_phone,
        )
        try:
            url = start_shirt_checkout(shirts, contact=contact, registration_id=registration.pk)
        except (CheckoutConfigurationError, StripeNotConfiguredError, stripe.StripeError):
            logger.exception("Shirt checkout after registration %s failed", registration.pk)
            messages.warning(request, "You're registered, but we could not start the shirt checkout.")
            return redirect(_thank_you_url())
        return redirect(url)
