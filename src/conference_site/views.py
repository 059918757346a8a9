"""Public pages and the health check."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils import timezone
from django.views import View
from django.views.generic import TemplateView

from conference_site.features import is_feature_enabled
from conference_site.poll.views import has_voted

if TYPE_CHECKING:
    from django.http import HttpRequest

logger = logging.getLogger(__name__)


class HomeView(TemplateView):
    """Landing page with the event details and calls to action."""

    template_name = "conference_site/pages/home.html"

    def get_context_data(self, **kwargs: object) -> dict[str, object]:
        """Flag a cancelled checkout so the page can say so."""
        context = super().get_context_data(**kwargs)
        context["checkout_cancelled"] = self.request.GET.get("checkout") == "cancel"
        return context


class ThankYouView(TemplateView):
    """Shown after registration or a completed checkout.

    With ``?poll=1`` the page invites the visitor to vote, unless this browser
    session already voted or the poll is switched off.
    """

    template_name = "conference_site/pages/thank_you.html"

    def get_context_data(self, **kwargs: object) -> dict[str, object]:
        """Decide whether to show the poll prompt."""
        context = super().get_context_data(**kwargs)
        wants_poll = self.request.GET.get("poll") == "1"
        context["show_poll_prompt"] = wants_poll and is_feature_enabled("poll") and not has_voted(self.request)
        context["checkout_success"] = self.request.GET.get("checkout") == "success"
        return context


class CancelView(TemplateView):
    """Shown when a visitor backs out of a checkout."""

    template_name = "conference_site/pages/cancel.html"


class HealthView(View):
    """``GET /api/health/``: database round trip plus the server time."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Run ``SELECT 1`` and report the result."""
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        except DatabaseError as exc:
            logger.exception("Health check failed")
            return JsonResponse({"ok": False, "error": str(exc)}, status=500)
        return JsonResponse({"ok": True, "now": timezone.now().isoformat()})
