"""Registration service.

Turns a submitted sign-up into a ``Registration`` with its ``Attendee`` rows.
Submissions that match an existing registration are answered with that
registration instead of creating a second one, so repeated submits of the
same form are safe.
"""

import logging
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from conference_site.registration.models import Attendee, Registration, ShirtSize, phone_digits
from conference_site.registration.notifications import send_registration_emails
from conference_site.registration.services.duplicates import find_existing_registration
from conference_site.registration.signals import registration_created

logger = logging.getLogger(__name__)


class DuplicateRegistrationError(Exception):
    """Raised when the database rejects a registration as a duplicate."""

    def __init__(self, field_name: str = "contact_email") -> None:
        super().__init__(f"Already registered ({field_name})")
        self.field_name = field_name


@dataclass(frozen=True, slots=True)
class AttendeeData:
    """A cleaned attendee row ready to be persisted."""

    name: str
    phone: str = ""
    email: str = ""
    address: str = ""
    notes: str = ""
    shirt_size: str = ""


@dataclass(frozen=True, slots=True)
class RegistrationSubmission:
    """Raw values submitted by the registration form."""

    contact_name: str
    contact_phone: str
    contact_email: str
    contact_address: str = ""
    prayer_request: str = ""
    attendees: tuple[dict[str, object], ...] = field(default_factory=tuple)
    primary_wants_shirt: bool = False
    primary_shirt_size: str = ""


@dataclass(frozen=True, slots=True)
class RegistrationResult:
    """The registration that answers a submission."""

    registration: Registration
    duplicate: bool = False


def normalize_shirt_size(value: object) -> str:
    """Map user input to a :class:`ShirtSize` value, or ``""`` when unknown."""
    if not value:
        return ""
    candidate = str(value).strip().upper()
    return candidate if candidate in ShirtSize.values else ""


def _clean(value: object) -> str:
    """Return a stripped string for any submitted value (``""`` for non-strings)."""
    return value.strip() if isinstance(value, str) else ""


def _same_person(a: AttendeeData, b: AttendeeData) -> bool:
    """Match on name, email, or phone, whichever is present on both sides."""
    if a.name and b.name and a.name.lower() == b.name.lower():
        return True
    if a.email and b.email and a.email == b.email:
        return True
    return bool(a.phone and b.phone and a.phone == b.phone)


class RegistrationService:
    """Stateless service for creating registrations."""

    @staticmethod
    def validate_contact(submission: RegistrationSubmission) -> None:
        """Reject submissions without a usable primary contact.

        Raises:
            ValidationError: If name, phone, or email is missing, or the email
                has no ``@``.
        """
        email = _clean(submission.contact_email)
        if not _clean(submission.contact_name) or not _clean(submission.contact_phone) or "@" not in email:
            raise ValidationError("Missing or invalid contact fields")

    @staticmethod
    def clean_attendees(submission: RegistrationSubmission) -> list[AttendeeData]:
        """Build the attendee list for a submission.

        Rows are trimmed and kept when they carry at least a name, email, or
        phone. The primary contact is prepended unless one of the rows already
        describes them.

        Args:
            submission: The submitted form values.

        Returns:
            Cleaned attendees, primary contact first when it was added.
        """
        cleaned: list[AttendeeData] = []
        for raw in submission.attendees:
            if not isinstance(raw, dict):
                continue
            attendee = AttendeeData(
                name=_clean(raw.get("name")),
                phone=_clean(raw.get("phone")),
                email=_clean(raw.get("email")).lower(),
                address=_clean(raw.get("address")),
                notes=_clean(raw.get("notes")),
                shirt_size=normalize_shirt_size(raw.get("shirt_size") or raw.get("shirtSize")),
            )
            if attendee.name or attendee.email or attendee.phone:
                cleaned.append(attendee)

        primary = AttendeeData(
            name=_clean(submission.contact_name),
            phone=_clean(submission.contact_phone),
            email=_clean(submission.contact_email).lower(),
            address=_clean(submission.contact_address),
            shirt_size=normalize_shirt_size(submission.primary_shirt_size) if submission.primary_wants_shirt else "",
        )
        if not any(_same_person(attendee, primary) for attendee in cleaned):
            cleaned.insert(0, primary)
        return cleaned

    @staticmethod
    def register(submission: RegistrationSubmission, *, send_emails: bool = True) -> RegistrationResult:
        """Persist a registration, or return the one it duplicates.

        Args:
            submission: The submitted form values.
            send_emails: Send the confirmation and admin emails after commit.

        Returns:
            A :class:`RegistrationResult`; ``duplicate`` is ``True`` when an
            existing registration was returned instead of creating one.

        Raises:
            ValidationError: If the contact fields are invalid or no attendee
                has a name.
            DuplicateRegistrationError: If a concurrent submission with the
                same email won the race to the unique constraint.
        """
        RegistrationService.validate_contact(submission)
        email = _clean(submission.contact_email).lower()
        phone = _clean(submission.contact_phone)

        existing = find_existing_registration(email, phone)
        if existing is not None:
            logger.info("Existing registration %s found for %s, returning it", existing.pk, email)
            return RegistrationResult(registration=existing, duplicate=True)

        attendees = RegistrationService.clean_attendees(submission)
        if not attendees or not attendees[0].name:
            raise ValidationError("At least one attendee is required")

        try:
            with transaction.atomic():
                registration = Registration.objects.create(
                    contact_name=_clean(submission.contact_name),
                    contact_phone=phone,
                    contact_email=email,
                    contact_address=_clean(submission.contact_address),
                    prayer_request=_clean(submission.prayer_request),
                )
                Attendee.objects.bulk_create(
                    [
                        Attendee(
                            registration=registration,
                            name=attendee.name,
                            phone=attendee.phone,
                            phone_digits=phone_digits(attendee.phone),
                            email=attendee.email,
                            address=attendee.address,
                            notes=attendee.notes,
                            wants_shirt=bool(attendee.shirt_size),
                            shirt_size=attendee.shirt_size,
                        )
                        for attendee in attendees
                    ]
                )
        except IntegrityError as exc:
            logger.warning("Duplicate registration rejected by the database for %s: %s", email, exc)
            raise DuplicateRegistrationError from exc

        logger.info(
            "Created registration %s with %d attendee(s)",
            registration.pk,
            len(attendees),
        )
        registration_created.send(sender=Registration, registration=registration)
        if send_emails:
            send_registration_emails(registration)
        return RegistrationResult(registration=registration)
