"""Checkout service for donations and t-shirt orders.

Builds Stripe Checkout Session parameters from site configuration and
submitted values, creates the session, and returns the hosted checkout URL.
Nothing is persisted here; payments are recorded when Stripe reports the
completed session through the webhook.
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from urllib.parse import urlsplit

import stripe
from django.core.exceptions import ValidationError

from conference_site.payments.stripe_client import StripeClient
from conference_site.payments.stripe_utils import clamp_amount_for_api
from conference_site.settings import SHIRT_SIZES, get_config

logger = logging.getLogger(__name__)

DONATION_SOURCE = "donation-form"


class CheckoutConfigurationError(ValueError):
    """Raised when the site is missing configuration needed for a checkout."""


@dataclass(frozen=True, slots=True)
class ShirtItem:
    """A single shirt in an order."""

    size: str
    attendee_name: str = ""


@dataclass(frozen=True, slots=True)
class CheckoutContact:
    """Contact details passed through to the checkout session."""

    name: str = ""
    email: str = ""
    phone: str = ""


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------


def _host_is_trusted(host: str, trusted_hosts: tuple[str, ...]) -> bool:
    return any(host == trusted or host.endswith(f".{trusted}") for trusted in trusted_hosts)


def site_base_url() -> str:
    """Return the absolute origin used for Stripe redirect URLs.

    The configured ``base_url`` is used when its host is a trusted host (or a
    subdomain of one); anything else falls back to the canonical domain so a
    misconfigured value can never send customers to a foreign site.
    """
    config = get_config()
    fallback = f"https://www.{config.canonical_domain}"
    parts = urlsplit(config.base_url)
    host = (parts.hostname or "").lower()
    if parts.scheme in ("http", "https") and host and _host_is_trusted(host, config.trusted_hosts):
        return f"{parts.scheme}://{parts.netloc}"
    return fallback


def merch_image_url(base_url: str) -> str:
    """Return the public, absolute product image URL for the tee."""
    configured = get_config().merch.image_url
    if configured and urlsplit(configured).scheme in ("http", "https") and urlsplit(configured).netloc:
        return configured
    return f"{base_url}/static/images/available-tee.png"


def _success_url(base_url: str) -> str:
    return f"{base_url}/thank-you/?checkout=success&poll=1"


# ---------------------------------------------------------------------------
# Donations
# ---------------------------------------------------------------------------


def parse_donation_amount(raw: object) -> Decimal:
    """Parse a donation amount entered in major units.

    Args:
        raw: A number or numeric string from the request.

    Returns:
        The positive amount as a Decimal (not yet clamped).

    Raises:
        ValidationError: If the value is not a finite, positive number.
    """
    if isinstance(raw, bool) or raw is None:
        raise ValidationError("Invalid amount")
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation as exc:
        raise ValidationError("Invalid amount") from exc
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Invalid amount")
    return amount


def build_donation_params(amount: Decimal, *, name: str = "", email: str = "", note: str = "") -> dict[str, object]:
    """Return Checkout Session parameters for a one-off donation.

    The amount is clamped to the configured donation range.
    """
    config = get_config()
    donations = config.donations
    base_url = site_base_url()
    unit_amount = clamp_amount_for_api(amount, donations.min_amount, donations.max_amount, config.currency)

    product_data: dict[str, object] = {"name": donations.product_name}
    if note:
        product_data["description"] = note[: donations.note_max_length]

    params: dict[str, object] = {
        "mode": "payment",
        "submit_type": "donate",
        "billing_address_collection": "auto",
        "line_items": [
            {
                "price_data": {
                    "currency": config.currency.lower(),
                    "unit_amount": unit_amount,
                    "product_data": product_data,
                },
                "quantity": 1,
            },
        ],
        "metadata": {
            "donor_name": name,
            "donor_email": email,
            "note": note,
            "source": DONATION_SOURCE,
        },
        "success_url": _success_url(base_url),
        "cancel_url": f"{base_url}/?checkout=cancel",
    }
    if email:
        params["customer_email"] = email
    return params


def start_donation_checkout(amount: Decimal, *, name: str = "", email: str = "", note: str = "") -> str:
    """Create a donation Checkout Session and return its hosted URL.

    The first attempt lets Stripe pick the available payment methods. If
    Stripe rejects that, the session is created again restricted to cards.

    Raises:
        StripeNotConfiguredError: If no Stripe secret key is configured.
        stripe.StripeError: If the card-only retry fails as well.
    """
    client = StripeClient()
    params = build_donation_params(amount, name=name, email=email, note=note)
    try:
        session = client.create_checkout_session({**params, "automatic_payment_methods": {"enabled": True}})
    except stripe.StripeError as exc:
        logger.warning("automatic_payment_methods failed; retrying with card only: %s", exc)
        session = client.create_checkout_session({**params, "payment_method_types": ["card"]})
    return str(session.url)


# ---------------------------------------------------------------------------
# Shirts
# ---------------------------------------------------------------------------


def normalize_size(value: object) -> str | None:
    """Return the canonical shirt size for *value*, or ``None`` when unknown."""
    if not value:
        return None
    candidate = str(value).strip().upper()
    return candidate if candidate in SHIRT_SIZES else None


def normalize_shirt_order(
    shirts: list[object] | None,
    *,
    primary_shirt_size: object = None,
    contact_name: str = "",
) -> list[ShirtItem]:
    """Turn submitted shirt rows into a non-empty list of :class:`ShirtItem`.

    When no rows are given, one shirt is derived from the size picked during
    registration. Unknown sizes fall back to the configured default size.
    """
    default_size = get_config().merch.default_size
    rows = [row for row in (shirts or []) if isinstance(row, dict)]
    if not rows:
        size = normalize_size(primary_shirt_size) or default_size
        return [ShirtItem(size=size, attendee_name=contact_name.strip())]
    return [
        ShirtItem(
            size=normalize_size(row.get("size")) or default_size,
            attendee_name=str(row.get("attendeeName") or row.get("attendee_name") or "").strip(),
        )
        for row in rows
    ]


def tee_pricing_configured() -> bool:
    """Return whether any tee price (saved or inline) is configured."""
    merch = get_config().merch
    return bool(merch.tee_price_id or merch.tee_price_cents or merch.price_ids_by_size)


def build_shirt_line_items(shirts: list[ShirtItem], base_url: str) -> list[dict[str, object]]:
    """Return Checkout line items for a shirt order.

    Three pricing modes, in order of precedence:

    * per-size saved prices: one line per size using ``price_ids_by_size``;
    * a single saved price: one adjustable line with the total quantity;
    * inline pricing: one ``price_data`` line per size named after the size.

    Raises:
        CheckoutConfigurationError: If a requested size has no saved price
            while per-size prices are in use.
    """
    config = get_config()
    merch = config.merch
    size_counts = Counter(shirt.size for shirt in shirts)

    if merch.price_ids_by_size:
        items: list[dict[str, object]] = []
        for size, quantity in size_counts.items():
            price_id = merch.price_ids_by_size.get(size)
            if not price_id:
                msg = f"Missing Stripe Price ID for size {size}"
                raise CheckoutConfigurationError(msg)
            items.append({"price": price_id, "quantity": quantity})
        return items

    if merch.tee_price_id and merch.tee_price_id.startswith("price_"):
        return [
            {
                "price": merch.tee_price_id,
                "quantity": max(1, sum(size_counts.values())),
                "adjustable_quantity": {"enabled": True, "minimum": 1, "maximum": merch.max_quantity},
            },
        ]

    unit_amount = merch.tee_price_cents or merch.default_price_cents
    image_url = merch_image_url(base_url)
    return [
        {
            "price_data": {
                "currency": config.currency.lower(),
                "unit_amount": unit_amount,
                "product_data": {
                    "name": f"{merch.product_name} ({size})",
                    "description": merch.product_description,
                    "images": [image_url],
                },
            },
            "quantity": quantity,
        }
        for size, quantity in size_counts.items()
    ]


def build_shirt_params(
    shirts: list[ShirtItem],
    *,
    contact: CheckoutContact,
    registration_id: object = None,
) -> dict[str, object]:
    """Return Checkout Session parameters for a shirt order.

    Sizes are recorded in metadata both as a CSV (``shirt_sizes``) and as a
    JSON list (``shirts``) so the webhook can attribute the order.
    """
    base_url = site_base_url()
    merch = get_config().merch
    params: dict[str, object] = {
        "mode": "payment",
        "locale": "auto",
        "submit_type": "pay",
        "customer_creation": "always",
        "billing_address_collection": "required",
        "shipping_address_collection": {"allowed_countries": list(merch.allowed_countries)},
        "phone_number_collection": {"enabled": True},
        "line_items": build_shirt_line_items(shirts, base_url),
        "metadata": {
            "registration_id": str(registration_id) if registration_id else "",
            "contact_name": contact.name,
            "contact_email": contact.email,
            "contact_phone": contact.phone,
            "shirt_sizes": ",".join(shirt.size for shirt in shirts),
            "shirts": json.dumps([{"size": s.size, "attendeeName": s.attendee_name} for s in shirts]),
        },
        "success_url": _success_url(base_url),
        "cancel_url": f"{base_url}/register/?checkout=cancelled",
    }
    if contact.email:
        params["customer_email"] = contact.email
    return params


def start_shirt_checkout(
    shirts: list[ShirtItem],
    *,
    contact: CheckoutContact | None = None,
    registration_id: object = None,
) -> str:
    """Create a shirt Checkout Session and return its hosted URL.

    Raises:
        CheckoutConfigurationError: If no tee price is configured, or a
            per-size price is missing.
        StripeNotConfiguredError: If no Stripe secret key is configured.
        stripe.StripeError: If Stripe rejects the session.
    """
    if not tee_pricing_configured():
        msg = "Missing STRIPE_TEE_PRICE_ID or STRIPE_TEE_PRICE_CENTS in environment"
        raise CheckoutConfigurationError(msg)
    contact = contact or CheckoutContact()
    params = build_shirt_params(shirts, contact=contact, registration_id=registration_id)
    session = StripeClient().create_checkout_session(params)
    logger.info(
        "Started shirt checkout %s for %s (%s)",
        session.id,
        contact.email or "anonymous",
        params["metadata"]["shirt_sizes"],  # type: ignore[index]
    )
    return str(session.url)
