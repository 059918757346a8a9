"""Transactional emails sent after a registration.

Both messages are best-effort: a failing mail backend is logged and never
propagates to the registration flow.
"""

import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from conference_site.registration.models import Registration
from conference_site.settings import get_config

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "Your {event} Registration is Confirmed!"
ADMIN_SUBJECT = "New Conference Registration Submitted"


def _from_address() -> str:
    """Return the ``"Name" <address>`` sender for outgoing mail."""
    email_config = get_config().email
    address = email_config.from_email or settings.DEFAULT_FROM_EMAIL
    return f'"{email_config.sender_name}" <{address}>'


def _send(subject: str, to: str, template: str, context: dict[str, object]) -> bool:
    """Render *template* as HTML and plain text and send it to *to*.

    Returns:
        ``True`` when the backend accepted the message, ``False`` otherwise.
    """
    html_body = render_to_string(f"conference_site/emails/{template}.html", context)
    text_body = render_to_string(f"conference_site/emails/{template}.txt", context)
    message = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=_from_address(),
        to=[to],
    )
    message.attach_alternative(html_body, "text/html")
    try:
        message.send()
    except Exception:  # noqa: BLE001
        logger.exception("Failed to send '%s' email to %s", template, to)
        return False
    return True


def send_registration_emails(registration: Registration) -> None:
    """Send the confirmation to the contact and the notice to the admin.

    Args:
        registration: The freshly created registration.
    """
    config = get_config()
    attendees = list(registration.attendees.all())
    context = {
        "registration": registration,
        "attendees": attendees,
        "event": config.event,
        "sender_name": config.email.sender_name,
    }

    if registration.contact_email:
        logger.info("Sending confirmation email for registration %s", registration.pk)
        _send(
            CONFIRMATION_SUBJECT.format(event=config.event.name),
            registration.contact_email,
            "registration_confirmation",
            context,
        )

    if config.email.admin_email:
        logger.info("Sending admin notification for registration %s", registration.pk)
        _send(ADMIN_SUBJECT, config.email.admin_email, "registration_admin", context)
