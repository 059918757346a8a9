"""Read-side queries for the admin dashboard.

Search and filter helpers shared by the HTML pages, the JSON APIs and the
CSV exports, plus the summary statistics shown on the overview page.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from django.db.models import Count, Q, QuerySet
from django.utils import timezone

from conference_site.payments.models import Payment
from conference_site.payments.stripe_client import StripeClient, as_plain_dict
from conference_site.payments.stripe_utils import convert_amount_for_db
from conference_site.payments.webhooks import is_donation_session
from conference_site.registration.models import Attendee, Registration
from conference_site.settings import SHIRT_SIZES, get_config

logger = logging.getLogger(__name__)

# Largest row offset the list APIs will ask the database for.
MAX_OFFSET = 1_000_000


def iso_utc(value: datetime | None) -> str:
    """Format *value* as an ISO-8601 UTC timestamp (``...Z``); ``""`` for ``None``."""
    if value is None:
        return ""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_int(raw: str | None, default: int, *, minimum: int = 0, maximum: int | None = None) -> int:
    """Parse a query-string integer, clamped to ``[minimum, maximum]``.

    Anything that is not an integer yields *default* (before clamping).
    """
    try:
        value = int(raw) if raw not in (None, "") else default
    except (TypeError, ValueError):
        value = default
    value = max(value, minimum)
    if maximum is not None:
        value = min(value, maximum)
    return value


def page_size(raw: str | None) -> int:
    """Return the requested page size clamped to ``[1, max_page_size]``."""
    dashboard = get_config().dashboard
    return parse_int(raw, dashboard.page_size, minimum=1, maximum=dashboard.max_page_size)


# ---------------------------------------------------------------------------
# Querysets
# ---------------------------------------------------------------------------


def search_registrations(query: str = "") -> QuerySet[Registration]:
    """Return registrations (newest first) matching *query*.

    Matches contact name, email or phone, or the name of any attendee.
    """
    qs = Registration.objects.all()
    query = query.strip()
    if query:
        matching = Registration.objects.filter(
            Q(contact_name__icontains=query)
            | Q(contact_email__icontains=query)
            | Q(contact_phone__icontains=query)
            | Q(attendees__name__icontains=query)
        ).values("pk")
        qs = qs.filter(pk__in=matching)
    return qs.prefetch_related("attendees").order_by("-created_at", "-id")


def search_payments(query: str = "", kind: str = "") -> QuerySet[Payment]:
    """Return payments (newest first) filtered by *kind* and matching *query*.

    *query* matches the Stripe id, email, name, shirt size or currency.
    Unknown kinds match nothing.
    """
    qs = Payment.objects.all()
    kind = kind.strip().lower()
    if kind:
        qs = qs.filter(kind=kind)
    query = query.strip()
    if query:
        qs = qs.filter(
            Q(stripe_id__icontains=query)
            | Q(email__icontains=query)
            | Q(name__icontains=query)
            | Q(shirt_size__icontains=query)
            | Q(currency__icontains=query)
        )
    return qs.order_by("-created_at", "-id")


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ShirtCount:
    """Number of attendees wanting a shirt of one size."""

    size: str
    count: int


@dataclass(frozen=True, slots=True)
class DashboardStats:
    """Headline numbers for the overview page."""

    registrations: int
    attendees: int
    shirts: list[ShirtCount]
    donations_usd: Decimal | None

    def as_json(self) -> dict[str, object]:
        """Return the stats with the keys used by the dashboard API."""
        return {
            "registrations": self.registrations,
            "attendees": self.attendees,
            "shirts": [{"size": shirt.size, "count": shirt.count} for shirt in self.shirts],
            "donationsUsd": float(self.donations_usd) if self.donations_usd is not None else None,
        }


def shirt_size_counts() -> list[ShirtCount]:
    """Return attendee shirt counts per size, in size order."""
    rows = (
        Attendee.objects.filter(wants_shirt=True)
        .exclude(shirt_size="")
        .values("shirt_size")
        .annotate(count=Count("id"))
    )
    counts = {row["shirt_size"]: row["count"] for row in rows}
    order = {size: idx for idx, size in enumerate(SHIRT_SIZES)}
    return [ShirtCount(size=size, count=counts[size]) for size in sorted(counts, key=lambda s: order.get(s, len(order)))]


def recent_donation_total() -> Decimal | None:
    """Sum the paid Stripe donation sessions of the configured window.

    Returns:
        The total in major currency units, or ``None`` when Stripe is not
        configured.

    Raises:
        stripe.StripeError: If Stripe cannot be queried.
    """
    config = get_config()
    if not config.stripe.secret_key:
        return None

    since = timezone.now() - timedelta(days=config.dashboard.donation_window_days)
    total_cents = 0
    for session in StripeClient().iter_checkout_sessions(since):
        data = as_plain_dict(session)
        if data.get("payment_status") == "paid" and is_donation_session(data):
            total_cents += int(data.get("amount_total") or 0)
    return convert_amount_for_db(total_cents, config.currency)


def dashboard_stats(*, include_donations: bool = True) -> DashboardStats:
    """Collect the overview statistics.

    Raises:
        stripe.StripeError: If the donation total cannot be fetched.
    """
    return DashboardStats(
        registrations=Registration.objects.count(),
        attendees=Attendee.objects.count(),
        shirts=shirt_size_counts(),
        donations_usd=recent_donation_total() if include_donations else None,
    )
