"""Duplicate registration lookup.

A registration counts as a duplicate when its contact email matches an
existing registration or attendee email, or when the last ten digits of its
phone number match an existing contact or attendee phone. Phone numbers are
compared on digits only so formatting differences do not matter.

The form endpoint answers with :func:`check_duplicate`. Registration itself
uses :func:`find_existing_registration`, which only matches the primary
contact of an existing registration.
"""

from dataclasses import asdict, dataclass

from django.db.models import Count, Q

from conference_site.registration.models import Registration, phone_digits

DUPLICATE_MESSAGE = "It looks like you’ve already registered. Would you like to purchase a shirt?"

_PHONE_MATCH_DIGITS = 10


@dataclass(frozen=True, slots=True)
class DuplicateResult:
    """Outcome of a duplicate lookup."""

    duplicate: bool
    existing_id: int | None = None
    via: str | None = None
    contact_name: str | None = None
    attendees_count: int = 0
    message: str | None = None

    def as_json(self) -> dict[str, object]:
        """Return the result with the camelCase keys used by the site's API."""
        data = asdict(self)
        return {
            "duplicate": data["duplicate"],
            "existingId": data["existing_id"],
            "via": data["via"],
            "contactName": data["contact_name"],
            "attendeesCount": data["attendees_count"],
            "message": data["message"],
        }


NO_DUPLICATE = DuplicateResult(duplicate=False)


def normalize_email(value: str | None) -> str | None:
    """Trim and lower-case an email address; empty input becomes ``None``."""
    if not value or not isinstance(value, str):
        return None
    cleaned = value.strip().lower()
    return cleaned or None


def normalize_phone_last10(value: str | None) -> str | None:
    """Reduce a phone number to its last ten digits.

    Numbers with fewer than ten digits are returned whole. Input without any
    digits becomes ``None``.
    """
    if not value or not isinstance(value, str):
        return None
    digits = phone_digits(value)
    if not digits:
        return None
    return digits[-_PHONE_MATCH_DIGITS:] if len(digits) >= _PHONE_MATCH_DIGITS else digits


def check_duplicate(email: str | None = None, phone: str | None = None) -> DuplicateResult:
    """Look for an existing registration matching *email* or *phone*.

    Args:
        email: Email address as entered by the registrant.
        phone: Phone number as entered by the registrant.

    Returns:
        A :class:`DuplicateResult`. ``via`` is ``"registration"`` when the
        primary contact matched and ``"attendee"`` when only an attendee on
        the registration matched.
    """
    clean_email = normalize_email(email)
    last10 = normalize_phone_last10(phone)
    if not clean_email and not last10:
        return NO_DUPLICATE

    contact_match = Q()
    attendee_match = Q()
    if clean_email:
        contact_match |= Q(contact_email=clean_email)
        attendee_match |= Q(attendees__email=clean_email)
    if last10:
        contact_match |= Q(contact_phone_digits__endswith=last10)
        attendee_match |= Q(attendees__phone_digits__endswith=last10)

    match_ids = Registration.objects.filter(contact_match | attendee_match).values("pk")
    existing = (
        Registration.objects.filter(pk__in=match_ids)
        .annotate(attendee_total=Count("attendees"))
        .order_by("created_at", "pk")
        .first()
    )
    if existing is None:
        return NO_DUPLICATE

    email_hit = bool(clean_email) and existing.contact_email == clean_email
    phone_hit = bool(last10) and existing.contact_phone_digits.endswith(last10)
    return DuplicateResult(
        duplicate=True,
        existing_id=existing.pk,
        via="registration" if email_hit or phone_hit else "attendee",
        contact_name=existing.contact_name or None,
        attendees_count=existing.attendee_total,
        message=DUPLICATE_MESSAGE,
    )


def find_existing_registration(email: str | None = None, phone: str | None = None) -> Registration | None:
    """Return the registration whose primary contact is this person, if any.

    Stricter than :func:`check_duplicate`: only the contact email (exact) and
    the contact phone (last ten digits, and only when the submitted number
    has at least ten) are considered. Attendee rows never match.
    """
    clean_email = normalize_email(email)
    digits = phone_digits(phone)
    match = Q()
    if clean_email:
        match |= Q(contact_email=clean_email)
    if len(digits) >= _PHONE_MATCH_DIGITS:
        match |= Q(contact_phone_digits__endswith=digits[-_PHONE_MATCH_DIGITS:])
    if not match:
        return None
    return Registration.objects.filter(match).prefetch_related("attendees").order_by("created_at", "pk").first()
