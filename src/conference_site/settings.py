"""Typed configuration for conference-site.

Reads a single ``CONFERENCE_SITE`` dict from Django settings and exposes it as
composed, frozen dataclasses with sensible defaults.

Usage::

    from conference_site.settings import get_config

    config = get_config()
    config.stripe.secret_key
    config.merch.tee_price_cents
    config.dashboard.password
"""

import functools
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from django.conf import settings
from django.test.signals import setting_changed

SHIRT_SIZES: tuple[str, ...] = ("XS", "S", "M", "L", "XL", "2XL", "3XL")


@dataclass(frozen=True, slots=True)
class StripeConfig:
    """Stripe payment gateway configuration."""

    secret_key: str | None = None
    publishable_key: str | None = None
    webhook_secret: str | None = None
    api_version: str = "2025-07-30.basil"
    webhook_tolerance: int = 300


@dataclass(frozen=True, slots=True)
class EventConfig:
    """Public details of the event, used by pages and emails."""

    name: str = "AVAILABLE Conference"
    dates: str = "October 17 & 18"
    venue: str = "Camp Living Waters"
    address: str = "21230 Livingwater Rd, Loranger, LA 70446"
    doors_open: str = "6 PM Friday Night"


@dataclass(frozen=True, slots=True)
class EmailConfig:
    """Transactional email configuration.

    ``from_email`` falls back to Django's ``DEFAULT_FROM_EMAIL`` when unset.
    The admin notification is skipped when ``admin_email`` is empty.
    """

    sender_name: str = "AVAILABLE Conference"
    from_email: str | None = None
    admin_email: str | None = None


@dataclass(frozen=True, slots=True)
class DonationConfig:
    """Limits and labels for the donation checkout."""

    min_amount: Decimal = Decimal(1)
    max_amount: Decimal = Decimal(100000)
    product_name: str = "AVAILABLE Donation"
    note_max_length: int = 250


@dataclass(frozen=True, slots=True)
class MerchConfig:
    """Pricing and presentation of the conference t-shirt.

    Pricing resolves in this order: per-size saved prices
    (``price_ids_by_size``), a single saved price (``tee_price_id``), and
    finally inline pricing from ``tee_price_cents``.
    """

    tee_price_id: str | None = None
    tee_price_cents: int | None = None
    default_price_cents: int = 2500
    price_ids_by_size: Mapping[str, str] = field(default_factory=dict)
    image_url: str | None = None
    product_name: str = "AVAILABLE Tee"
    product_description: str = "Declare it. Wear it."
    default_size: str = "M"
    allowed_countries: tuple[str, ...] = ("US", "CA")
    max_quantity: int = 10


@dataclass(frozen=True, slots=True)
class DashboardConfig:
    """Password-gated admin dashboard configuration."""

    password: str | None = None
    cookie_name: str = "admin_auth"
    cookie_salt: str = "conference_site.dashboard"
    cookie_max_age: int = 60 * 60 * 8
    cookie_secure: bool = True
    page_size: int = 25
    max_page_size: int = 100
    donation_window_days: int = 30


@dataclass(frozen=True, slots=True)
class FeaturesConfig:
    """Feature toggles for the public site and the dashboard.

    All features are enabled by default. Set to ``False`` in
    ``CONFERENCE_SITE['features']`` to disable.
    """

    registration_enabled: bool = True
    donations_enabled: bool = True
    merch_enabled: bool = True
    poll_enabled: bool = True
    dashboard_enabled: bool = True


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Top-level conference-site configuration."""

    stripe: StripeConfig = field(default_factory=StripeConfig)
    event: EventConfig = field(default_factory=EventConfig)
    email: EmailConfig = field(default_factory=EmailConfig)
    donations: DonationConfig = field(default_factory=DonationConfig)
    merch: MerchConfig = field(default_factory=MerchConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    features: FeaturesConfig = field(default_factory=FeaturesConfig)
    base_url: str = "https://www.godscoffeecall.com"
    canonical_domain: str = "godscoffeecall.com"
    trusted_hosts: tuple[str, ...] = ("godscoffeecall.com",)
    currency: str = "USD"
    speakers: tuple[str, ...] = ()


_SECTIONS: dict[str, type] = {
    "stripe": StripeConfig,
    "event": EventConfig,
    "email": EmailConfig,
    "donations": DonationConfig,
    "merch": MerchConfig,
    "dashboard": DashboardConfig,
    "features": FeaturesConfig,
}


@functools.lru_cache(maxsize=1)
def get_config() -> SiteConfig:
    """Build and return the site configuration.

    Reads ``settings.CONFERENCE_SITE`` (a plain dict) and returns a frozen
    :class:`SiteConfig`.  The result is cached; the cache is cleared
    automatically when Django's ``setting_changed`` signal fires (e.g. inside
    ``override_settings``).
    """
    raw = getattr(settings, "CONFERENCE_SITE", {})
    if not isinstance(raw, Mapping):
        msg = "CONFERENCE_SITE must be a mapping (dict-like object)"
        raise TypeError(msg)
    raw_data = dict(raw)

    sections: dict[str, object] = {}
    for key, section_cls in _SECTIONS.items():
        section_data = raw_data.pop(key, {})
        if not isinstance(section_data, Mapping):
            msg = f"CONFERENCE_SITE['{key}'] must be a mapping (dict-like object)"
            raise TypeError(msg)
        sections[key] = section_cls(**_coerce_section(key, dict(section_data)))

    for key in ("trusted_hosts", "speakers"):
        if key in raw_data:
            raw_data[key] = tuple(raw_data[key])

    config = SiteConfig(**sections, **raw_data)
    _validate_site_config(config)
    return config


def _coerce_section(key: str, data: dict[str, object]) -> dict[str, object]:
    """Normalize values that settings files commonly write as plain types."""
    if key == "donations":
        for name in ("min_amount", "max_amount"):
            if name in data and not isinstance(data[name], Decimal):
                data[name] = Decimal(str(data[name]))
    if key == "merch":
        if "allowed_countries" in data:
            data["allowed_countries"] = tuple(data["allowed_countries"])  # type: ignore[arg-type]
        if "price_ids_by_size" in data:
            prices = data["price_ids_by_size"]
            if not isinstance(prices, Mapping):
                msg = "CONFERENCE_SITE['merch']['price_ids_by_size'] must be a mapping"
                raise TypeError(msg)
            # Empty environment variables leave blank entries behind.
            data["price_ids_by_size"] = {str(size).upper(): str(pid) for size, pid in prices.items() if pid}
    return data


def _validate_site_config(config: SiteConfig) -> None:
    """Validate high-impact configuration values with clear error messages."""
    if not isinstance(config.currency, str) or not config.currency.strip():
        msg = "CONFERENCE_SITE['currency'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.base_url, str) or not config.base_url.startswith(("http://", "https://")):
        msg = "CONFERENCE_SITE['base_url'] must be an absolute http(s) URL"
        raise ValueError(msg)
    if not config.canonical_domain:
        msg = "CONFERENCE_SITE['canonical_domain'] must be a non-empty string"
        raise ValueError(msg)

    dashboard = config.dashboard
    if not isinstance(dashboard.page_size, int) or dashboard.page_size <= 0:
        msg = "CONFERENCE_SITE['dashboard']['page_size'] must be a positive integer"
        raise ValueError(msg)
    if not isinstance(dashboard.max_page_size, int) or dashboard.max_page_size < dashboard.page_size:
        msg = "CONFERENCE_SITE['dashboard']['max_page_size'] must be an integer >= page_size"
        raise ValueError(msg)
    if not isinstance(dashboard.cookie_max_age, int) or dashboard.cookie_max_age <= 0:
        msg = "CONFERENCE_SITE['dashboard']['cookie_max_age'] must be a positive integer"
        raise ValueError(msg)

    donations = config.donations
    if donations.min_amount <= 0 or donations.min_amount > donations.max_amount:
        msg = "CONFERENCE_SITE['donations'] requires 0 < min_amount <= max_amount"
        raise ValueError(msg)

    merch = config.merch
    if merch.tee_price_cents is not None and (
        not isinstance(merch.tee_price_cents, int) or merch.tee_price_cents <= 0
    ):
        msg = "CONFERENCE_SITE['merch']['tee_price_cents'] must be a positive integer"
        raise ValueError(msg)
    if merch.default_size not in SHIRT_SIZES:
        msg = f"CONFERENCE_SITE['merch']['default_size'] must be one of {', '.join(SHIRT_SIZES)}"
        raise ValueError(msg)
    unknown = set(merch.price_ids_by_size) - set(SHIRT_SIZES)
    if unknown:
        msg = f"CONFERENCE_SITE['merch']['price_ids_by_size'] has unknown sizes: {', '.join(sorted(unknown))}"
        raise ValueError(msg)


def _clear_config_cache(*, setting: str, **kwargs: object) -> None:  # noqa: ARG001
    """Clear the cached config when Django settings change during tests."""
    if setting == "CONFERENCE_SITE":
        get_config.cache_clear()


setting_changed.connect(_clear_config_cache, dispatch_uid="conference_site.settings.clear_config_cache")
