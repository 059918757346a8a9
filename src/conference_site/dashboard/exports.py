"""CSV exports for the admin dashboard.

Each export writes a header row followed by one row per record with
:mod:`csv`, and returns a ``text/csv`` attachment response.
"""

import csv
from collections.abc import Iterable

from django.db.models import QuerySet
from django.http import HttpResponse

from conference_site.dashboard.services import iso_utc
from conference_site.payments.models import Payment
from conference_site.payments.stripe_utils import convert_amount_for_db
from conference_site.poll.models import SpeakerPoll
from conference_site.registration.models import Registration

REGISTRATION_HEADERS = [
    "createdAt",
    "contactName",
    "contactEmail",
    "contactPhone",
    "contactAddress",
    "attendeeName",
    "attendeeEmail",
    "attendeePhone",
    "wantsShirt",
    "shirtSize",
]
PAYMENT_HEADERS = ["createdAt", "type", "amountUSD", "currency", "name", "email", "shirtSize", "stripeId"]
POLL_HEADERS = ["speaker", "votes", "createdAt", "updatedAt"]


def csv_response(filename: str, headers: list[str], rows: Iterable[list[object]]) -> HttpResponse:
    """Write *rows* under *headers* into a CSV attachment named *filename*."""
    response = HttpResponse(content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    writer = csv.writer(response)
    writer.writerow(headers)
    writer.writerows(rows)
    return response


def registration_rows(registrations: QuerySet[Registration]) -> Iterable[list[object]]:
    """Yield one row per attendee; a registration without attendees gets one blank-attendee row."""
    for registration in registrations.prefetch_related("attendees"):
        contact = [
            iso_utc(registration.created_at),
            registration.contact_name,
            registration.contact_email,
            registration.contact_phone,
            registration.contact_address,
        ]
        attendees = list(registration.attendees.all())
        if not attendees:
            yield [*contact, "", "", "", "", ""]
            continue
        for attendee in attendees:
            yield [
                *contact,
                attendee.name,
                attendee.email,
                attendee.phone,
                "YES" if attendee.wants_shirt else "NO",
                attendee.shirt_size,
            ]


def payment_rows(payments: QuerySet[Payment]) -> Iterable[list[object]]:
    """Yield one row per payment with the amount in dollars."""
    for payment in payments:
        yield [
            iso_utc(payment.created_at),
            payment.kind,
            f"{convert_amount_for_db(payment.amount_cents, 'usd'):.2f}",
            (payment.currency or "usd").upper(),
            payment.name,
            payment.email,
            payment.shirt_size,
            payment.stripe_id,
        ]


def poll_rows(rows: Iterable[SpeakerPoll]) -> Iterable[list[object]]:
    """Yield one row per speaker."""
    for row in rows:
        yield [row.speaker, row.votes, iso_utc(row.created_at), iso_utc(row.updated_at)]


def export_registrations(registrations: QuerySet[Registration]) -> HttpResponse:
    """Return ``registrations.csv``."""
    return csv_response("registrations.csv", REGISTRATION_HEADERS, registration_rows(registrations))


def export_payments(payments: QuerySet[Payment]) -> HttpResponse:
    """Return ``payments.csv``."""
    return csv_response("payments.csv", PAYMENT_HEADERS, payment_rows(payments))


def export_poll(rows: Iterable[SpeakerPoll]) -> HttpResponse:
    """Return ``speaker-poll.csv``."""
    return csv_response("speaker-poll.csv", POLL_HEADERS, poll_rows(rows))
