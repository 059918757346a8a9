"""Tests for the dashboard password cookie."""

import json
import time
from unittest.mock import patch

import pytest
from django.test import RequestFactory, override_settings

from conference_site.dashboard.auth import check_password, is_authenticated, safe_next_url

LOGIN_URL = "/dashboard/login/"
COOKIE = "admin_auth"


def _login_json(client, password):
    return client.post(LOGIN_URL, data=json.dumps({"password": password}), content_type="application/json")


@pytest.mark.unit
class TestCheckPassword:
    def test_correct_password(self):
        assert check_password("letmein") is True

    @pytest.mark.parametrize("submitted", ["wrong", "", None, 123, "letmein "])
    def test_wrong_password(self, submitted):
        assert check_password(submitted) is False

    def test_unconfigured_password_refuses_everything(self, caplog):
        with override_settings(CONFERENCE_SITE={}):
            assert check_password("letmein") is False
            assert check_password("") is False
        assert "no dashboard password is configured" in caplog.text


@pytest.mark.unit
class TestSafeNextUrl:
    @pytest.fixture
    def request_obj(self):
        return RequestFactory().get("/dashboard/login/")

    def test_local_path_is_kept(self, request_obj):
        assert safe_next_url(request_obj, "/dashboard/payments/?type=shirt") == "/dashboard/payments/?type=shirt"

    @pytest.mark.parametrize("candidate", [None, "", "https://evil.example.com/", "//evil.example.com/", "payments/"])
    def test_anything_else_goes_to_overview(self, request_obj, candidate):
        assert safe_next_url(request_obj, candidate) == "/dashboard/"


@pytest.mark.django_db
class TestLoginView:
    def test_get_renders_form_with_next(self, client):
        response = client.get(LOGIN_URL, {"next": "/dashboard/poll/"})

        assert response.status_code == 200
        assert response.context["form"].initial["next"] == "/dashboard/poll/"

    def test_json_login_sets_signed_cookie(self, client):
        response = _login_json(client, "letmein")

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        cookie = response.cookies[COOKIE]
        assert cookie["httponly"] is True
        assert cookie["samesite"] == "Lax"
        assert cookie["path"] == "/"
        assert cookie["max-age"] == 60 * 60 * 8
        assert cookie.value != "1"

    def test_json_login_wrong_password(self, client):
        response = _login_json(client, "nope")

        assert response.status_code == 401
        assert response.json() == {"ok": False}
        assert COOKIE not in response.cookies

    def test_json_login_bad_body(self, client):
        response = client.post(LOGIN_URL, data="{", content_type="application/json")
        assert response.status_code == 401

    def test_form_login_redirects_to_next(self, client):
        response = client.post(LOGIN_URL, {"password": "letmein", "next": "/dashboard/poll/"})

        assert response.status_code == 302
        assert response.url == "/dashboard/poll/"
        assert COOKIE in response.cookies

    def test_form_login_rejects_foreign_next(self, client):
        response = client.post(LOGIN_URL, {"password": "letmein", "next": "https://evil.example.com/"})
        assert response.url == "/dashboard/"

    def test_form_login_wrong_password_rerenders(self, client):
        response = client.post(LOGIN_URL, {"password": "nope"})

        assert response.status_code == 401
        assert "Invalid password." in response.content.decode()

    def test_logged_in_get_skips_form(self, client):
        _login_json(client, "letmein")
        response = client.get(LOGIN_URL)
        assert response.status_code == 302
        assert response.url == "/dashboard/"

    def test_disabled_dashboard_returns_404(self, client):
        with override_settings(CONFERENCE_SITE={"features": {"dashboard_enabled": False}}):
            assert client.get(LOGIN_URL).status_code == 404


@pytest.mark.django_db
class TestAuthRequired:
    def test_html_view_redirects_to_login(self, client):
        response = client.get("/dashboard/payments/", {"type": "shirt"})

        assert response.status_code == 302
        assert response.url == "/dashboard/login/?next=%2Fdashboard%2Fpayments%2F%3Ftype%3Dshirt"

    def test_json_view_returns_401(self, client):
        response = client.get("/dashboard/api/stats/")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_export_requires_login(self, client):
        assert client.get("/dashboard/export/poll.csv").status_code == 302

    def test_tampered_cookie_is_rejected(self, client):
        client.cookies[COOKIE] = "1"
        assert client.get("/dashboard/api/poll/").status_code == 401

    def test_cookie_expires(self, client):
        _login_json(client, "letmein")
        assert client.get("/dashboard/api/poll/").status_code == 200

        later = time.time() + 60 * 60 * 8 + 60
        with patch("django.core.signing.time.time", return_value=later):
            assert client.get("/dashboard/api/poll/").status_code == 401

    def test_cookie_useless_once_password_removed(self, client):
        _login_json(client, "letmein")
        with override_settings(CONFERENCE_SITE={}):
            assert client.get("/dashboard/api/poll/").status_code == 401

    def test_disabled_dashboard_hides_views_even_when_logged_in(self, client):
        _login_json(client, "letmein")
        disabled = {"dashboard": {"password": "letmein"}, "features": {"dashboard_enabled": False}}
        with override_settings(CONFERENCE_SITE=disabled):
            assert client.get("/dashboard/api/poll/").status_code == 404

    def test_is_authenticated_without_cookie(self):
        assert is_authenticated(RequestFactory().get("/dashboard/")) is False


@pytest.mark.django_db
class TestLogoutView:
    def test_post_clears_cookie(self, client):
        _login_json(client, "letmein")
        response = client.post("/dashboard/logout/")

        assert response.status_code == 302
        assert response.url == "/dashboard/login/"
        assert response.cookies[COOKIE]["max-age"] == 0
        assert client.get("/dashboard/api/poll/").status_code == 401

    def test_get_not_allowed(self, client):
        assert client.get("/dashboard/logout/").status_code == 405
