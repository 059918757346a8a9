"""Tests for the StripeClient wrapper in conference_site.payments.stripe_client."""

from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest
from django.test import override_settings

from conference_site.payments.stripe_client import StripeClient, StripeNotConfiguredError, as_plain_dict
from conference_site.settings import get_config


@pytest.fixture
def mock_stripe_client_cls():
    with patch("conference_site.payments.stripe_client.stripe.StripeClient") as mock_cls:
        mock_instance = MagicMock()
        mock_cls.return_value = mock_instance
        yield mock_cls, mock_instance.v1


@pytest.mark.unit
class TestInit:
    def test_init_raises_without_secret_key(self):
        with override_settings(CONFERENCE_SITE={}):
            with pytest.raises(StripeNotConfiguredError, match="secret key is not configured"):
                StripeClient()

    def test_init_with_configured_key(self, mock_stripe_client_cls):
        mock_cls, _ = mock_stripe_client_cls

        StripeClient()

        mock_cls.assert_called_once_with(
            "sk_test_conference",
            stripe_version=get_config().stripe.api_version,
        )

    def test_explicit_key_wins(self, mock_stripe_client_cls):
        mock_cls, _ = mock_stripe_client_cls

        StripeClient("sk_test_other")

        assert mock_cls.call_args.args == ("sk_test_other",)


@pytest.mark.unit
class TestCheckoutSessions:
    def test_create_checkout_session(self, mock_stripe_client_cls):
        _, mock_v1 = mock_stripe_client_cls
        mock_v1.checkout.sessions.create.return_value = MagicMock(id="cs_test_1", url="https://checkout")

        session = StripeClient().create_checkout_session({"mode": "payment"})

        assert session.id == "cs_test_1"
        mock_v1.checkout.sessions.create.assert_called_once_with(params={"mode": "payment"})

    def test_retrieve_checkout_session_expands_related_objects(self, mock_stripe_client_cls):
        _, mock_v1 = mock_stripe_client_cls

        StripeClient().retrieve_checkout_session("cs_test_1")

        mock_v1.checkout.sessions.retrieve.assert_called_once_with(
            "cs_test_1",
            params={"expand": ["payment_intent", "customer"]},
        )

    def test_iter_checkout_sessions_pages_through_results(self, mock_stripe_client_cls):
        _, mock_v1 = mock_stripe_client_cls
        page = MagicMock()
        page.auto_paging_iter.return_value = iter(["cs_1", "cs_2", "cs_3"])
        mock_v1.checkout.sessions.list.return_value = page
        since = datetime(2026, 9, 1, tzinfo=UTC)

        sessions = list(StripeClient().iter_checkout_sessions(since))

        assert sessions == ["cs_1", "cs_2", "cs_3"]
        mock_v1.checkout.sessions.list.assert_called_once_with(
            params={"limit": 100, "created": {"gte": int(since.timestamp())}},
        )


@pytest.mark.unit
class TestAsPlainDict:
    def test_mapping(self):
        assert as_plain_dict({"id": "cs_1"}) == {"id": "cs_1"}

    def test_object_with_to_dict(self):
        obj = MagicMock()
        obj.to_dict.return_value = {"id": "cs_2"}
        assert as_plain_dict(obj) == {"id": "cs_2"}

    def test_anything_else(self):
        assert as_plain_dict(None) == {}
        assert as_plain_dict("cs_3") == {}
