"""Tests for the dashboard queries and stats."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from django.test import override_settings
from django.utils import timezone

from conference_site.dashboard.services import (
    DashboardStats,
    ShirtCount,
    dashboard_stats,
    iso_utc,
    page_size,
    parse_int,
    recent_donation_total,
    search_payments,
    search_registrations,
    shirt_size_counts,
)
from conference_site.payments.models import Payment
from conference_site.registration.models import Attendee, Registration


@pytest.fixture
def registrations(db):
    jane = Registration.objects.create(contact_name="Jane Doe", contact_phone="985-555-0101", contact_email="jane@x.com")
    Attendee.objects.create(registration=jane, name="Jane Doe", shirt_size="L")
    Attendee.objects.create(registration=jane, name="Johnny Appleseed", shirt_size="XS")
    Attendee.objects.create(registration=jane, name="Jill Doe", shirt_size="L")
    bob = Registration.objects.create(contact_name="Bob Smith", contact_phone="504-555-0199", contact_email="bob@y.com")
    Attendee.objects.create(registration=bob, name="Bob Smith", shirt_size="3XL")
    Attendee.objects.create(registration=bob, name="Ann Smith")
    return jane, bob


@pytest.fixture
def payments(db):
    return [
        Payment.objects.create(stripe_id="cs_1", kind="donation", amount_cents=2500, email="dana@x.com", name="Dana"),
        Payment.objects.create(stripe_id="cs_2", kind="shirt", amount_cents=5000, email="jane@x.com", shirt_size="L"),
        Payment.objects.create(stripe_id="cs_3", kind="shirt", amount_cents=2500, email="bob@y.com", shirt_size="M"),
    ]


@pytest.fixture
def mock_stripe_client():
    with patch("conference_site.dashboard.services.StripeClient") as mock_cls:
        instance = MagicMock()
        mock_cls.return_value = instance
        yield instance


@pytest.mark.unit
class TestHelpers:
    def test_iso_utc(self):
        value = datetime(2026, 10, 1, 7, 30, tzinfo=UTC) + timedelta(microseconds=123456)
        assert iso_utc(value) == "2026-10-01T07:30:00.123Z"

    def test_iso_utc_converts_to_utc(self):
        value = datetime(2026, 10, 1, 2, 0, tzinfo=timezone.get_fixed_timezone(-300))
        assert iso_utc(value) == "2026-10-01T07:00:00.000Z"

    def test_iso_utc_none(self):
        assert iso_utc(None) == ""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("5", 5), (None, 3), ("", 3), ("abc", 3), ("-4", 0), ("7.5", 3)],
    )
    def test_parse_int(self, raw, expected):
        assert parse_int(raw, 3) == expected

    def test_parse_int_maximum(self):
        assert parse_int("500", 3, maximum=100) == 100

    @pytest.mark.parametrize(("raw", "expected"), [(None, 25), ("10", 10), ("0", 1), ("-3", 1), ("1000", 100)])
    def test_page_size_is_clamped(self, raw, expected):
        assert page_size(raw) == expected


@pytest.mark.django_db
class TestSearch:
    def test_all_registrations_newest_first(self, registrations):
        jane, bob = registrations
        assert list(search_registrations()) == [bob, jane]

    @pytest.mark.parametrize("query", ["jane@x", "JANE DOE", "985-555", "appleseed"])
    def test_registration_matches(self, registrations, query):
        jane, _ = registrations
        assert list(search_registrations(query)) == [jane]

    def test_attendee_match_does_not_duplicate_rows(self, registrations):
        jane, _ = registrations
        assert list(search_registrations("doe")) == [jane]

    def test_payments_filtered_by_kind(self, payments):
        assert [p.stripe_id for p in search_payments(kind="shirt")] == ["cs_3", "cs_2"]
        assert [p.stripe_id for p in search_payments(kind=" DONATION ")] == ["cs_1"]
        assert list(search_payments(kind="refund")) == []

    @pytest.mark.parametrize(("query", "expected"), [("cs_2", ["cs_2"]), ("x.com", ["cs_2", "cs_1"]), ("bob", ["cs_3"])])
    def test_payments_search(self, payments, query, expected):
        assert [p.stripe_id for p in search_payments(query)] == expected


@pytest.mark.django_db
class TestStats:
    def test_shirt_counts_in_size_order(self, registrations):
        assert shirt_size_counts() == [ShirtCount("XS", 1), ShirtCount("L", 2), ShirtCount("3XL", 1)]

    def test_recent_donation_total_sums_paid_donations(self, mock_stripe_client):
        mock_stripe_client.iter_checkout_sessions.return_value = [
            {"payment_status": "paid", "submit_type": "donate", "amount_total": 2500},
            {"payment_status": "paid", "metadata": {"source": "donation-form"}, "amount_total": 1050},
            {"payment_status": "unpaid", "submit_type": "donate", "amount_total": 9999},
            {"payment_status": "paid", "submit_type": "pay", "amount_total": 5000},
        ]

        assert recent_donation_total() == Decimal("35.50")
        (since,) = mock_stripe_client.iter_checkout_sessions.call_args.args
        assert timezone.now() - since > timedelta(days=29, hours=23)

    def test_recent_donation_total_without_key(self, mock_stripe_client):
        with override_settings(CONFERENCE_SITE={}):
            assert recent_donation_total() is None
        mock_stripe_client.iter_checkout_sessions.assert_not_called()

    def test_dashboard_stats(self, registrations, mock_stripe_client):
        mock_stripe_client.iter_checkout_sessions.return_value = []

        stats = dashboard_stats()

        assert stats.registrations == 2
        assert stats.attendees == 5
        assert stats.donations_usd == Decimal("0.00")
        assert stats.as_json() == {
            "registrations": 2,
            "attendees": 5,
            "shirts": [{"size": "XS", "count": 1}, {"size": "L", "count": 2}, {"size": "3XL", "count": 1}],
            "donationsUsd": 0.0,
        }

    def test_dashboard_stats_without_donations(self, registrations, mock_stripe_client):
        stats = dashboard_stats(include_donations=False)

        assert stats.donations_usd is None
        assert stats.as_json()["donationsUsd"] is None
        mock_stripe_client.iter_checkout_sessions.assert_not_called()


@pytest.mark.unit
def test_stats_as_json_converts_decimal():
    stats = DashboardStats(registrations=1, attendees=1, shirts=[], donations_usd=Decimal("12.34"))
    assert stats.as_json()["donationsUsd"] == 12.34
