"""JSON representations of registration models.

Keys use camelCase to match what the site's front-end scripts and the
dashboard API consumers expect.
"""

from conference_site.registration.models import Attendee, Registration


def serialize_attendee(attendee: Attendee) -> dict[str, object]:
    """Return a JSON-ready dict for an attendee."""
    return {
        "id": attendee.pk,
        "name": attendee.name,
        "email": attendee.email or None,
        "phone": attendee.phone,
        "address": attendee.address or None,
        "notes": attendee.notes or None,
        "wantsShirt": attendee.wants_shirt,
        "shirtSize": attendee.shirt_size or None,
        "createdAt": attendee.created_at.isoformat(),
    }


def serialize_registration(registration: Registration) -> dict[str, object]:
    """Return a JSON-ready dict for a registration and its attendees.

    The prayer request is left out; it is only shown to the contact and the
    admin inbox.
    """
    return {
        "id": registration.pk,
        "createdAt": registration.created_at.isoformat(),
        "contactName": registration.contact_name,
        "contactEmail": registration.contact_email or None,
        "contactPhone": registration.contact_phone,
        "contactAddress": registration.contact_address or None,
        "attendees": [serialize_attendee(attendee) for attendee in registration.attendees.all()],
    }
