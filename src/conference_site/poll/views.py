"""Views for the speaker poll."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from conference_site.features import FeatureRequiredMixin
from conference_site.http import InvalidJSONBodyError, json_body, json_error
from conference_site.poll.forms import VoteForm
from conference_site.poll.models import SpeakerPoll
from conference_site.poll.services import PollService, serialize_poll_row

if TYPE_CHECKING:
    from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

VOTED_SESSION_KEY = "conference_site_poll_voted"


def has_voted(request: HttpRequest) -> bool:
    """Return whether this browser session already voted."""
    return bool(request.session.get(VOTED_SESSION_KEY))


@method_decorator(csrf_exempt, name="dispatch")
class PollAPIView(FeatureRequiredMixin, View):
    """``/api/poll/``: list speakers, or vote with ``{"speaker": ...}``."""

    required_feature = "poll"
    http_method_names = ["get", "post"]

    def get(self, request: HttpRequest) -> JsonResponse:  # noqa: ARG002
        """Return every speaker ordered by votes."""
        results = PollService.results()
        return JsonResponse([serialize_poll_row(row) for row in results.rows], safe=False)

    def post(self, request: HttpRequest) -> JsonResponse:
        """Record one vote and return the refreshed row."""
        try:
            body = json_body(request)
        except InvalidJSONBodyError:
            return json_error("Invalid JSON body", status=400)

        speaker = body.get("speaker")
        if not isinstance(speaker, str) or not speaker.strip():
            return json_error("Speaker is required", status=400)

        try:
            row = PollService.cast_vote(speaker.strip())
        except SpeakerPoll.DoesNotExist:
            return json_error("Unknown speaker", status=404)
        return JsonResponse(serialize_poll_row(row))


class PollView(FeatureRequiredMixin, View):
    """Poll page: one vote per browser session, then the standings."""

    required_feature = "poll"
    template_name = "conference_site/poll/poll.html"

    def _render(self, request: HttpRequest, form: VoteForm, *, status: int = 200) -> HttpResponse:
        voted = has_voted(request)
        results = PollService.results()
        context = {
            "form": form,
            "voted": voted,
            "results": results,
            "rows": [(row, results.percentage(row)) for row in results.rows],
        }
        return render(request, self.template_name, context, status=status)

    def get(self, request: HttpRequest) -> HttpResponse:
        """Render the ballot, or the standings after voting."""
        return self._render(request, VoteForm())

    def post(self, request: HttpRequest) -> HttpResponse:
        """Record the vote once per session."""
        if has_voted(request):
            messages.info(request, "You have already voted. Thank you!")
            return redirect("poll:poll")

        form = VoteForm(request.POST)
        if not form.is_valid():
            return self._render(request, form, status=400)

        try:
            PollService.cast_vote(form.cleaned_data["speaker"])
        except SpeakerPoll.DoesNotExist:
            form.add_error("speaker", "That speaker is not on the ballot.")
            return self._render(request, form, status=400)

        request.session[VOTED_SESSION_KEY] = True
        messages.success(request, "Thanks for voting!")
        return redirect("poll:poll")
