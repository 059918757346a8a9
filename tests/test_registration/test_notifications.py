"""Tests for the registration emails."""

from unittest.mock import patch

import pytest
from django.core import mail
from django.test import override_settings

from conference_site.registration.models import Attendee, Registration
from conference_site.registration.notifications import send_registration_emails


@pytest.fixture
def registration(db):
    reg = Registration.objects.create(
        contact_name="Jane Doe",
        contact_phone="(985) 555-0101",
        contact_email="jane@example.com",
        prayer_request="Traveling mercies",
    )
    Attendee.objects.create(registration=reg, name="Jane Doe", phone="(985) 555-0101", shirt_size="M")
    Attendee.objects.create(registration=reg, name="John Doe")
    return reg


@pytest.mark.django_db
class TestSendRegistrationEmails:
    def test_confirmation_lists_ticket_count_and_event(self, registration):
        send_registration_emails(registration)

        confirmation = mail.outbox[0]
        assert confirmation.to == ["jane@example.com"]
        assert confirmation.from_email == '"AVAILABLE Conference" <info@example.com>'
        assert "Tickets Reserved: 2" in confirmation.body
        assert "Traveling mercies" in confirmation.body
        assert "Camp Living Waters" in confirmation.body
        html, mimetype = confirmation.alternatives[0]
        assert mimetype == "text/html"
        assert "Jane Doe" in html

    def test_admin_notice_lists_attendees_and_sizes(self, registration):
        send_registration_emails(registration)

        admin = mail.outbox[1]
        assert admin.to == ["admin@example.com"]
        assert "- Jane Doe ((985) 555-0101) - Shirt Size: M" in admin.body
        assert "- John Doe (N/A) - Shirt Size: N/A" in admin.body

    def test_sender_falls_back_to_default_from_email(self, registration):
        with override_settings(CONFERENCE_SITE={"email": {"sender_name": "Test Team"}}):
            send_registration_emails(registration)

        assert [message.from_email for message in mail.outbox] == ['"Test Team" <info@example.com>']

    def test_backend_failure_is_logged_not_raised(self, registration, caplog):
        with patch(
            "conference_site.registration.notifications.EmailMultiAlternatives.send",
            side_effect=OSError("smtp down"),
        ):
            send_registration_emails(registration)

        assert mail.outbox == []
        assert "Failed to send 'registration_confirmation' email to jane@example.com" in caplog.text
