"""Views for the password-gated admin dashboard.

HTML pages for the overview, payments and poll results, JSON APIs that
back them, and CSV exports. Every view except login requires the dashboard
cookie (see :mod:`conference_site.dashboard.auth`).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import stripe
from django.contrib import messages
from django.http import HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.views import View
from django.views.generic import ListView, TemplateView

from conference_site.dashboard.auth import (
    DashboardAuthRequiredMixin,
    check_password,
    clear_auth_cookie,
    is_authenticated,
    safe_next_url,
    set_auth_cookie,
)
from conference_site.dashboard.exports import export_payments, export_poll, export_registrations
from conference_site.dashboard.forms import LoginForm
from conference_site.dashboard.services import (
    MAX_OFFSET,
    dashboard_stats,
    iso_utc,
    page_size,
    parse_int,
    search_payments,
    search_registrations,
)
from conference_site.features import FeatureRequiredMixin
from conference_site.http import InvalidJSONBodyError, json_body, json_error
from conference_site.payments.models import Payment
from conference_site.payments.stripe_client import StripeNotConfiguredError
from conference_site.poll.services import PollService, serialize_poll_row
from conference_site.registration.models import Registration
from conference_site.registration.serializers import serialize_registration
from conference_site.settings import get_config

if TYPE_CHECKING:
    from django.db.models import QuerySet
    from django.http import HttpRequest

logger = logging.getLogger(__name__)


def serialize_payment(payment: Payment) -> dict[str, object]:
    """Return a JSON-ready dict for a payment row."""
    return {
        "id": payment.pk,
        "createdAt": iso_utc(payment.created_at),
        "type": payment.kind,
        "amountCents": payment.amount_cents,
        "currency": payment.currency,
        "name": payment.name or None,
        "email": payment.email or None,
        "shirtSize": payment.shirt_size or None,
        "stripeId": payment.stripe_id,
    }


# ---------------------------------------------------------------------------
# Login / logout
# ---------------------------------------------------------------------------


class LoginView(FeatureRequiredMixin, View):
    """Dashboard login.

    Accepts a form post from the login page or a JSON body
    ``{"password": ...}``. A correct password sets the dashboard cookie;
    anything else answers 401.
    """

    required_feature = "dashboard"
    template_name = "conference_site/dashboard/login.html"

    def get(self, request: HttpRequest) -> HttpResponse:
        """Render the login form, or skip it when already signed in."""
        next_url = safe_next_url(request, request.GET.get("next"))
        if is_authenticated(request):
            return redirect(next_url)
        return render(request, self.template_name, {"form": LoginForm(initial={"next": next_url})})

    def post(self, request: HttpRequest) -> HttpResponse:
        """Check the password and set the cookie."""
        if request.content_type == "application/json":
            return self._json_login(request)

        form = LoginForm(request.POST)
        if form.is_valid() and check_password(form.cleaned_data["password"]):
            logger.info("Dashboard login from %s", request.META.get("REMOTE_ADDR", "unknown"))
            return set_auth_cookie(redirect(safe_next_url(request, form.cleaned_data.get("next"))))

        logger.warning("Failed dashboard login from %s", request.META.get("REMOTE_ADDR", "unknown"))
        form.add_error(None, "Invalid password.")
        return render(request, self.template_name, {"form": form}, status=401)

    def _json_login(self, request: HttpRequest) -> JsonResponse:
        try:
            body = json_body(request)
        except InvalidJSONBodyError:
            body = {}
        if not check_password(body.get("password")):
            logger.warning("Failed dashboard login from %s", request.META.get("REMOTE_ADDR", "unknown"))
            return JsonResponse({"ok": False}, status=401)
        return set_auth_cookie(JsonResponse({"ok": True}))


class LogoutView(View):
    """Clear the dashboard cookie and return to the login page."""

    http_method_names = ["post"]

    def post(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
        """Delete the cookie."""
        return clear_auth_cookie(redirect("dashboard:login"))


# ---------------------------------------------------------------------------
# HTML pages
# ---------------------------------------------------------------------------


class OverviewView(DashboardAuthRequiredMixin, ListView):
    """Dashboard home: headline stats and the searchable registrations list."""

    template_name = "conference_site/dashboard/overview.html"
    context_object_name = "registrations"

    def get_paginate_by(self, queryset: QuerySet[Registration]) -> int:  # noqa: ARG002
        """Return the configured dashboard page size."""
        return get_config().dashboard.page_size

    def get_queryset(self) -> QuerySet[Registration]:
        """Return registrations matching the ``q`` search parameter."""
        return search_registrations(self.request.GET.get("q", ""))

    def get_context_data(self, **kwargs: object) -> dict[str, object]:
        """Add stats, the search query and the active nav to the context.

        A Stripe failure leaves the donation total empty and shows a
        warning instead of failing the page.
        """
        context = super().get_context_data(**kwargs)
        try:
            stats = dashboard_stats()
        except (StripeNotConfiguredError, stripe.StripeError):
            logger.exception("Could not load the donation total from Stripe")
            messages.warning(self.request, "Could not load the donation total from Stripe.")
            stats = dashboard_stats(include_donations=False)
        context["stats"] = stats
        context["search_query"] = self.request.GET.get("q", "")
        context["active_nav"] = "overview"
        return context


class PaymentsView(DashboardAuthRequiredMixin, ListView):
    """Searchable, filterable list of recorded payments."""

    template_name = "conference_site/dashboard/payments.html"
    context_object_name = "payments"

    def get_paginate_by(self, queryset: QuerySet[Payment]) -> int:  # noqa: ARG002
        """Return the configured dashboard page size."""
        return get_config().dashboard.page_size

    def get_queryset(self) -> QuerySet[Payment]:
        """Return payments matching the ``q`` and ``type`` parameters."""
        return search_payments(self.request.GET.get("q", ""), self.request.GET.get("type", ""))

    def get_context_data(self, **kwargs: object) -> dict[str, object]:
        """Add the filters, the kind choices and the active nav."""
        context = super().get_context_data(**kwargs)
        context["search_query"] = self.request.GET.get("q", "")
        context["type_filter"] = self.request.GET.get("type", "")
        context["kind_choices"] = Payment.Kind.choices
        context["active_nav"] = "payments"
        return context


class PollResultsView(DashboardAuthRequiredMixin, TemplateView):
    """Speaker poll standings with percentages and a reset button."""

    template_name = "conference_site/dashboard/poll.html"

    def get_context_data(self, **kwargs: object) -> dict[str, object]:
        """Add the poll rows with their vote share."""
        context = super().get_context_data(**kwargs)
        results = PollService.results()
        context["results"] = results
        context["rows"] = [(row, results.percentage(row)) for row in results.rows]
        context["active_nav"] = "poll"
        return context

    def post(self, request: HttpRequest) -> HttpResponse:
        """Handle the reset action."""
        if request.POST.get("action") != "reset":
            messages.error(request, "Unsupported action.")
            return redirect("dashboard:poll")
        count = PollService.reset()
        messages.success(request, f"Reset votes for {count} speaker(s).")
        return redirect("dashboard:poll")


# ---------------------------------------------------------------------------
# JSON APIs
# ---------------------------------------------------------------------------


class RegistrationsAPIView(DashboardAuthRequiredMixin, View):
    """``GET /dashboard/api/registrations/?q&skip&take`` -> ``{rows, total}``."""

    json_api = True
    http_method_names = ["get"]

    def get(self, request: HttpRequest) -> JsonResponse:
        """Return one slice of the matching registrations."""
        take = page_size(request.GET.get("take"))
        skip = parse_int(request.GET.get("skip"), 0, maximum=MAX_OFFSET)
        qs = search_registrations(request.GET.get("q", ""))
        rows = [serialize_registration(registration) for registration in qs[skip : skip + take]]
        return JsonResponse({"rows": rows, "total": qs.count()})


class PaymentsAPIView(DashboardAuthRequiredMixin, View):
    """``GET /dashboard/api/payments/?q&type&page&take`` -> ``{rows, total, page, take}``.

    ``page`` is zero-based and ``take`` is clamped to ``[1, max_page_size]``.
    Pages past ``MAX_OFFSET`` rows are clamped to the last reachable page.
    """

    json_api = True
    http_method_names = ["get"]

    def get(self, request: HttpRequest) -> JsonResponse:
        """Return one page of the matching payments."""
        take = page_size(request.GET.get("take"))
        page = parse_int(request.GET.get("page"), 0, maximum=MAX_OFFSET // take)
        qs = search_payments(request.GET.get("q", ""), request.GET.get("type", ""))
        start = page * take
        rows = [serialize_payment(payment) for payment in qs[start : start + take]]
        return JsonResponse({"rows": rows, "total": qs.count(), "page": page, "take": take})


class PollAdminAPIView(DashboardAuthRequiredMixin, View):
    """``/dashboard/api/poll/``: standings (GET) or ``{"action": "reset"}`` (POST)."""

    json_api = True
    http_method_names = ["get", "post"]

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return the standings and the total vote count."""
        results = PollService.results()
        return JsonResponse(
            {"rows": [serialize_poll_row(row) for row in results.rows], "totalVotes": results.total_votes}
        )

    def post(self, request: HttpRequest) -> JsonResponse:
        """Reset the poll."""
        try:
            body = json_body(request)
        except InvalidJSONBodyError:
            body = {}
        if body.get("action") != "reset":
            return json_error("Unsupported action", status=400)
        PollService.reset()
        return JsonResponse({"ok": True})


class StatsAPIView(DashboardAuthRequiredMixin, View):
    """``GET /dashboard/api/stats/`` -> ``{registrations, attendees, shirts, donationsUsd}``."""

    json_api = True
    http_method_names = ["get"]

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return the headline numbers."""
        try:
            stats = dashboard_stats()
        except (StripeNotConfiguredError, stripe.StripeError):
            logger.exception("Failed to load dashboard stats")
            return json_error("Failed to load stats", status=500)
        return JsonResponse(stats.as_json())


# ---------------------------------------------------------------------------
# CSV exports
# ---------------------------------------------------------------------------


class RegistrationsExportView(DashboardAuthRequiredMixin, View):
    """Download registrations as CSV (one row per attendee)."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest) -> HttpResponse:
        """Export registrations matching the optional ``q`` parameter."""
        return export_registrations(search_registrations(request.GET.get("q", "")))


class PaymentsExportView(DashboardAuthRequiredMixin, View):
    """Download payments as CSV with the same filters as the list."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest) -> HttpResponse:
        """Export payments matching ``q`` and ``type``."""
        return export_payments(search_payments(request.GET.get("q", ""), request.GET.get("type", "")))


class PollExportView(DashboardAuthRequiredMixin, View):
    """Download the poll standings as CSV."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest) -> HttpResponse:  # noqa: ARG002
        """Export every speaker with their votes."""
        return export_poll(PollService.results().rows)

