"""Password-cookie authentication for the admin dashboard.

The dashboard is not tied to Django user accounts. A single shared password
(``CONFERENCE_SITE["dashboard"]["password"]``) unlocks it; a successful login
stores a signed, http-only cookie that expires after ``cookie_max_age``
seconds. Without a configured password every login attempt is refused.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from django.core import signing
from django.http import JsonResponse
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.crypto import constant_time_compare
from django.utils.http import url_has_allowed_host_and_scheme

from conference_site.features import FeatureRequiredMixin, require_feature
from conference_site.settings import get_config

if TYPE_CHECKING:
    from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

_COOKIE_VALUE = "1"


def check_password(submitted: object) -> bool:
    """Compare *submitted* with the dashboard password in constant time.

    Returns:
        ``False`` when no password is configured, *submitted* is empty, or it
        does not match.
    """
    expected = get_config().dashboard.password
    if not expected:
        logger.warning("Dashboard login attempted but no dashboard password is configured")
        return False
    if not isinstance(submitted, str) or not submitted:
        return False
    return constant_time_compare(submitted, expected)


def is_authenticated(request: HttpRequest) -> bool:
    """Return whether *request* carries a valid, unexpired dashboard cookie."""
    dashboard = get_config().dashboard
    if not dashboard.password:
        return False
    try:
        value = request.get_signed_cookie(
            dashboard.cookie_name,
            salt=dashboard.cookie_salt,
            max_age=dashboard.cookie_max_age,
        )
    except (KeyError, signing.BadSignature):
        return False
    return value == _COOKIE_VALUE


def set_auth_cookie(response: HttpResponse) -> HttpResponse:
    """Attach the signed dashboard cookie to *response*."""
    dashboard = get_config().dashboard
    response.set_signed_cookie(
        dashboard.cookie_name,
        _COOKIE_VALUE,
        salt=dashboard.cookie_salt,
        max_age=dashboard.cookie_max_age,
        httponly=True,
        samesite="Lax",
        secure=dashboard.cookie_secure,
        path="/",
    )
    return response


def clear_auth_cookie(response: HttpResponse) -> HttpResponse:
    """Remove the dashboard cookie from the browser."""
    response.delete_cookie(get_config().dashboard.cookie_name, path="/", samesite="Lax")
    return response


def safe_next_url(request: HttpRequest, candidate: str | None) -> str:
    """Return *candidate* when it is a local path, else the dashboard home."""
    fallback = reverse("dashboard:overview")
    if not candidate or not candidate.startswith("/"):
        return fallback
    if not url_has_allowed_host_and_scheme(candidate, allowed_hosts={request.get_host()}, require_https=False):
        return fallback
    return candidate


class DashboardAuthRequiredMixin(FeatureRequiredMixin):
    """Require the dashboard cookie before dispatching the view.

    HTML views redirect to the login page with ``?next=`` set to the
    requested path; views with ``json_api = True`` answer 401 instead.
    """

    required_feature = "dashboard"
    json_api = False

    def dispatch(self, request: HttpRequest, *args: object, **kwargs: object) -> HttpResponse:
        """Check the feature toggle and the dashboard cookie before dispatching."""
        require_feature("dashboard")
        if not is_authenticated(request):
            return self.handle_unauthenticated(request)
        return super().dispatch(request, *args, **kwargs)

    def handle_unauthenticated(self, request: HttpRequest) -> HttpResponse:
        """Return the response sent to requests without a valid cookie."""
        if self.json_api:
            return JsonResponse({"error": "Unauthorized"}, status=401)
        login_url = reverse("dashboard:login")
        return redirect(f"{login_url}?{urlencode({'next': request.get_full_path()})}")
