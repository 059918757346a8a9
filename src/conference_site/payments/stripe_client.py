"""Stripe client wrapper for Checkout Session operations.

The client is initialized from the site's Stripe configuration and uses the
modern ``stripe.StripeClient`` pattern (v1 namespace) for all API calls.
"""

import logging
from collections.abc import Iterator, Mapping
from datetime import datetime

import stripe

from conference_site.payments.stripe_utils import obfuscate_key
from conference_site.settings import get_config

logger = logging.getLogger(__name__)


class StripeNotConfiguredError(ValueError):
    """Raised when no Stripe secret key is configured."""


def as_plain_dict(obj: object) -> dict[str, object]:
    """Return a plain ``dict`` view of a Stripe object or mapping.

    Older ``stripe`` releases return ``dict`` subclasses; newer ones expose
    ``to_dict()``.  Anything else yields an empty dict.
    """
    if isinstance(obj, Mapping):
        return dict(obj)
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        result = to_dict()
        if isinstance(result, Mapping):
            return dict(result)
    return {}


class StripeClient:
    """Site-wide Stripe API client.

    Wraps ``stripe.StripeClient`` (v1 namespace) and binds every call to the
    configured secret key and API version.

    Args:
        secret_key: Optional key overriding ``CONFERENCE_SITE['stripe']['secret_key']``.

    Raises:
        StripeNotConfiguredError: If no Stripe secret key is available.
    """

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the client with the configured Stripe credentials."""
        config = get_config()
        key = secret_key or config.stripe.secret_key
        if not key:
            msg = (
                "Stripe secret key is not configured. "
                "Set CONFERENCE_SITE['stripe']['secret_key'] before initializing StripeClient."
            )
            raise StripeNotConfiguredError(msg)

        self.client = stripe.StripeClient(
            str(key),
            stripe_version=config.stripe.api_version,
        )
        logger.debug("Initialized StripeClient with key %s", obfuscate_key(str(key)))

    def create_checkout_session(self, params: dict[str, object]) -> stripe.checkout.Session:
        """Create a hosted Checkout Session.

        Args:
            params: Session creation parameters.

        Returns:
            The created ``stripe.checkout.Session``.
        """
        session = self.client.v1.checkout.sessions.create(params=params)
        logger.info("Created Stripe checkout session %s", session.id)
        return session

    def retrieve_checkout_session(self, session_id: str) -> stripe.checkout.Session:
        """Fetch a Checkout Session with its payment intent and customer expanded.

        Args:
            session_id: The Checkout Session id (``cs_...``).
        """
        return self.client.v1.checkout.sessions.retrieve(
            session_id,
            params={"expand": ["payment_intent", "customer"]},
        )

    def iter_checkout_sessions(self, created_since: datetime) -> Iterator[stripe.checkout.Session]:
        """Iterate over every Checkout Session created since *created_since*.

        Args:
            created_since: Lower bound (inclusive) for the session creation time.

        Yields:
            ``stripe.checkout.Session`` objects, newest first.
        """
        page = self.client.v1.checkout.sessions.list(
            params={"limit": 100, "created": {"gte": int(created_since.timestamp())}},
        )
        yield from page.auto_paging_iter()
