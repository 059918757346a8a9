"""Tests for the payments views."""

import json
from decimal import Decimal
from unittest.mock import patch

import pytest
import stripe as _stripe
from django.test import override_settings
from django.urls import reverse

from conference_site.payments.services.checkout import CheckoutConfigurationError, CheckoutContact, ShirtItem
from conference_site.payments.stripe_client import StripeNotConfiguredError
from conference_site.payments.views import MISSING_TEE_PRICE

CHECKOUT_URL = "https://checkout.stripe.com/c/pay/cs_test_123"


def _post_json(client, url, payload):
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return client.post(url, data=body, content_type="application/json")


@pytest.mark.django_db
class TestDonationCheckoutView:
    url = "/api/checkout/donation/"

    @patch("conference_site.payments.views.start_donation_checkout", return_value=CHECKOUT_URL)
    def test_returns_checkout_url(self, mock_start, client):
        response = _post_json(
            client,
            self.url,
            {"amount": "25.5", "name": " Jane ", "email": "jane@example.com", "note": "x" * 400},
        )

        assert response.status_code == 200
        assert response.json() == {"url": CHECKOUT_URL}
        args, kwargs = mock_start.call_args
        assert args == (Decimal("25.5"),)
        assert kwargs["name"] == "Jane"
        assert kwargs["email"] == "jane@example.com"
        assert len(kwargs["note"]) == 250

    @pytest.mark.parametrize("amount", [None, "", "abc", 0, -10, True])
    def test_invalid_amount_returns_400(self, client, amount):
        response = _post_json(client, self.url, {"amount": amount})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid amount"}

    def test_invalid_json_returns_400(self, client):
        response = _post_json(client, self.url, "{oops")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}

    @pytest.mark.parametrize("error", [_stripe.APIConnectionError("down"), StripeNotConfiguredError("no key")])
    def test_stripe_failure_returns_500(self, client, error):
        with patch("conference_site.payments.views.start_donation_checkout", side_effect=error):
            response = _post_json(client, self.url, {"amount": 10})

        assert response.status_code == 500
        assert response.json() == {"error": "Unable to create donation session"}

    def test_disabled_feature_returns_404(self, client):
        with override_settings(CONFERENCE_SITE={"features": {"donations_enabled": False}}):
            response = _post_json(client, self.url, {"amount": 10})
        assert response.status_code == 404


@pytest.mark.django_db
class TestShirtCheckoutView:
    url = "/api/checkout/shirt/"

    @patch("conference_site.payments.views.start_shirt_checkout", return_value=CHECKOUT_URL)
    def test_returns_checkout_url(self, mock_start, client):
        response = _post_json(
            client,
            self.url,
            {
                "shirts": [{"size": "l", "attendeeName": "John"}, {"size": "M"}],
                "contact": {"name": "Jane", "email": "jane@example.com", "phone": "985-555-0101"},
                "registrationId": 7,
            },
        )

        assert response.status_code == 200
        assert response.json() == {"url": CHECKOUT_URL}
        args, kwargs = mock_start.call_args
        assert args[0] == [ShirtItem("L", "John"), ShirtItem("M", "")]
        assert kwargs["contact"] == CheckoutContact(name="Jane", email="jane@example.com", phone="985-555-0101")
        assert kwargs["registration_id"] == 7

    @patch("conference_site.payments.views.start_shirt_checkout", return_value=CHECKOUT_URL)
    def test_unparseable_body_orders_one_default_shirt(self, mock_start, client):
        response = _post_json(client, self.url, "not json")

        assert response.status_code == 200
        assert mock_start.call_args.args[0] == [ShirtItem("M", "")]

    @patch("conference_site.payments.views.start_shirt_checkout", return_value=CHECKOUT_URL)
    def test_primary_size_used_without_rows(self, mock_start, client):
        _post_json(client, self.url, {"primaryShirtSize": "xs", "contact": {"name": "Jane"}})

        assert mock_start.call_args.args[0] == [ShirtItem("XS", "Jane")]

    def test_missing_price_returns_400(self, client):
        with override_settings(CONFERENCE_SITE={}):
            response = _post_json(client, self.url, {})

        assert response.status_code == 400
        assert response.json() == {"error": MISSING_TEE_PRICE}

    @pytest.mark.parametrize(
        "error",
        [_stripe.InvalidRequestError("bad", param="line_items"), CheckoutConfigurationError("no size price")],
    )
    def test_checkout_failure_returns_500(self, client, error):
        with patch("conference_site.payments.views.start_shirt_checkout", side_effect=error):
            response = _post_json(client, self.url, {})

        assert response.status_code == 500
        assert response.json() == {"error": "Unable to create checkout session"}


@pytest.mark.django_db
class TestDonateView:
    def test_get_renders_form(self, client):
        response = client.get(reverse("payments:donate"))
        assert response.status_code == 200
        assert "form" in response.context

    @patch("conference_site.payments.views.start_donation_checkout", return_value=CHECKOUT_URL)
    def test_post_redirects_to_stripe(self, mock_start, client):
        response = client.post(reverse("payments:donate"), {"amount": "20", "name": "Jane", "email": "", "note": ""})

        assert response.status_code == 302
        assert response.url == CHECKOUT_URL
        assert mock_start.call_args.args == (Decimal(20),)

    def test_invalid_amount_rerenders(self, client):
        response = client.post(reverse("payments:donate"), {"amount": "0"})
        assert response.status_code == 400
        assert "amount" in response.context["form"].errors

    def test_stripe_failure_rerenders_with_message(self, client):
        with patch(
            "conference_site.payments.views.start_donation_checkout",
            side_effect=_stripe.APIConnectionError("down"),
        ):
            response = client.post(reverse("payments:donate"), {"amount": "20"})

        assert response.status_code == 500
        assert "could not start the donation checkout" in response.content.decode()


@pytest.mark.django_db
class TestMerchView:
    def test_get_prefills_from_query_string(self, client):
        response = client.get(reverse("payments:merch"), {"name": "Jane", "email": "jane@example.com"})

        assert response.status_code == 200
        assert response.context["available"] is True
        assert response.context["price"] == 25
        assert response.context["form"].initial == {"name": "Jane", "email": "jane@example.com"}

    @patch("conference_site.payments.views.start_shirt_checkout", return_value=CHECKOUT_URL)
    def test_post_orders_quantity_of_size(self, mock_start, client):
        response = client.post(
            reverse("payments:merch"),
            {"name": "Jane", "email": "jane@example.com", "phone": "", "size": "L", "quantity": "3"},
        )

        assert response.status_code == 302
        assert response.url == CHECKOUT_URL
        assert mock_start.call_args.args[0] == [ShirtItem("L", "Jane")] * 3
        assert mock_start.call_args.kwargs["contact"].email == "jane@example.com"

    def test_quantity_is_capped(self, client):
        response = client.post(reverse("payments:merch"), {"size": "M", "quantity": "11"})
        assert response.status_code == 400
        assert "quantity" in response.context["form"].errors

    def test_unavailable_without_price(self, client):
        with override_settings(CONFERENCE_SITE={}):
            response = client.get(reverse("payments:merch"))
            post_response = client.post(reverse("payments:merch"), {"size": "M", "quantity": "1"})

        assert response.context["available"] is False
        assert "not available online" in response.content.decode()
        assert post_response.status_code == 400
