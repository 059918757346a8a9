"""Stripe webhook handling for the payments app.

Events are verified against the configured webhook secret, stored once per
Stripe event id, and dispatched through a registry that maps each event kind
(e.g. ``checkout.session.completed``) to a handler class.

Usage in URL configuration::

    from conference_site.payments.webhooks import stripe_webhook

    urlpatterns = [
        path("api/stripe/webhook/", stripe_webhook),
    ]
"""

from __future__ import annotations

import json
import logging
import traceback
from typing import TYPE_CHECKING

import stripe
from django.db import transaction
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from conference_site.http import json_error
from conference_site.payments.models import EventProcessingException, Payment, StripeEvent
from conference_site.payments.signals import payment_recorded
from conference_site.payments.stripe_client import StripeClient, as_plain_dict
from conference_site.registration.models import Registration
from conference_site.settings import get_config

if TYPE_CHECKING:
    from django.http import HttpRequest

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class WebhookRegistry:
    """Registry mapping Stripe event kinds to handler classes."""

    def __init__(self) -> None:
        """Initialize an empty handler registry."""
        self._registry: dict[str, type[Webhook]] = {}

    def register(self, kind: str, handler_class: type[Webhook]) -> None:
        """Register *handler_class* for the Stripe event type *kind*."""
        self._registry[kind] = handler_class

    def get(self, kind: str) -> type[Webhook] | None:
        """Return the handler class for *kind*, or ``None``."""
        return self._registry.get(kind)

    def keys(self) -> list[str]:
        """Return all registered event kinds."""
        return list(self._registry.keys())


registry = WebhookRegistry()


# ---------------------------------------------------------------------------
# Base handler
# ---------------------------------------------------------------------------


class Webhook:
    """Base class for Stripe webhook event handlers.

    Subclasses set ``name`` to the Stripe event kind they handle and
    implement ``process_webhook()``. ``process()`` wraps execution with the
    already-processed check and exception capture.

    Attributes:
        name: The Stripe event kind this handler processes.
        event: The ``StripeEvent`` model instance being handled.
    """

    name: str = ""

    def __init__(self, event: StripeEvent) -> None:
        """Bind the handler to a stored Stripe event."""
        self.event = event

    def process(self) -> None:
        """Run the handler once, then mark the event processed.

        On failure the traceback is captured to ``EventProcessingException``
        and the exception is re-raised.
        """
        if self.event.processed:
            logger.info("Event %s already processed, skipping", self.event.stripe_id)
            return

        try:
            self.process_webhook()
            self.send_signal()
            self.event.processed = True
            self.event.save(update_fields=["processed"])
        except Exception:
            self.log_exception()
            raise

    def process_webhook(self) -> None:
        """Implement event-specific processing logic.

        Raises:
            NotImplementedError: Subclasses must override this method.
        """
        raise NotImplementedError

    def send_signal(self) -> None:
        """Send a Django signal after successful processing (no-op by default)."""

    def log_exception(self) -> None:
        """Capture the current exception to ``EventProcessingException``."""
        tb = traceback.format_exc()
        logger.error("Error processing webhook %s (event %s): %s", self.name, self.event.stripe_id, tb)
        EventProcessingException.objects.create(
            event=self.event,
            data=json.dumps(self.event.payload, default=str),
            message=tb[:500],
            traceback=tb,
        )


def _event_data_object(event: StripeEvent) -> dict[str, object]:
    """Return the ``data.object`` dict of a stored event payload."""
    payload = event.payload
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, dict):
            obj = data.get("object")
            if isinstance(obj, dict):
                return obj
    return {}


def _as_dict(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}


def shirt_sizes_from_metadata(metadata: dict[str, object]) -> list[str]:
    """Read the ordered shirt sizes recorded on a checkout session.

    The ``shirt_sizes`` CSV wins; the ``shirts`` JSON list is the fallback.
    Unparseable JSON yields no sizes.
    """
    csv_value = str(metadata.get("shirt_sizes") or "")
    if csv_value:
        return [size.strip() for size in csv_value.split(",") if size.strip()]

    json_value = str(metadata.get("shirts") or "")
    if not json_value:
        return []
    try:
        rows = json.loads(json_value)
    except json.JSONDecodeError:
        return []
    if not isinstance(rows, list):
        return []
    return [str(row["size"]) for row in rows if isinstance(row, dict) and isinstance(row.get("size"), str)]


def is_donation_session(session: dict[str, object]) -> bool:
    """Return whether a checkout session was a donation rather than a shirt order."""
    metadata = _as_dict(session.get("metadata"))
    source = str(metadata.get("source") or "").lower()
    return session.get("submit_type") == "donate" or "donation" in source


def _registration_from_metadata(metadata: dict[str, object]) -> Registration | None:
    raw_id = str(metadata.get("registration_id") or "").strip()
    if not raw_id.isdigit():
        return None
    return Registration.objects.filter(pk=int(raw_id)).first()


# ---------------------------------------------------------------------------
# Concrete handlers
# ---------------------------------------------------------------------------


class CheckoutSessionCompletedWebhook(Webhook):
    """Handles ``checkout.session.completed`` events.

    Retrieves the expanded session from Stripe and records a ``Payment``
    keyed by the session id. A session that was already recorded is left
    untouched.
    """

    name = "checkout.session.completed"

    def __init__(self, event: StripeEvent) -> None:
        """Bind the handler and reset the recorded payment."""
        super().__init__(event)
        self.payment: Payment | None = None
        self.created = False

    @transaction.atomic
    def process_webhook(self) -> None:
        """Fetch the full session and upsert the payment row."""
        session_id = str(_event_data_object(self.event).get("id") or "")
        if not session_id:
            msg = f"Event {self.event.stripe_id} has no checkout session id"
            raise ValueError(msg)

        session = as_plain_dict(StripeClient().retrieve_checkout_session(session_id))
        details = _as_dict(session.get("customer_details"))
        metadata = _as_dict(session.get("metadata"))
        donation = is_donation_session(session)
        sizes = [] if donation else shirt_sizes_from_metadata(metadata)
        fallback_name = metadata.get("donor_name") if donation else metadata.get("contact_name")

        self.payment, self.created = Payment.objects.get_or_create(
            stripe_id=str(session.get("id") or session_id),
            defaults={
                "kind": Payment.Kind.DONATION if donation else Payment.Kind.SHIRT,
                "amount_cents": int(session.get("amount_total") or 0),
                "currency": str(session.get("currency") or "usd").lower(),
                "email": str(details.get("email") or session.get("customer_email") or "").lower(),
                "name": str(details.get("name") or fallback_name or ""),
                "shirt_size": sizes[0] if sizes else "",
                "shirt_sizes": ",".join(sizes),
                "payment_status": str(session.get("payment_status") or ""),
                "registration": _registration_from_metadata(metadata),
            },
        )

        logger.info(
            "checkout.session.completed %s: %s %s %s (%s)",
            self.payment.stripe_id,
            self.payment.kind,
            self.payment.amount_cents,
            self.payment.currency,
            "recorded" if self.created else "already recorded",
        )

    def send_signal(self) -> None:
        """Fire ``payment_recorded`` for downstream listeners."""
        if self.payment is not None:
            payment_recorded.send(sender=Payment, payment=self.payment, created=self.created)


# ---------------------------------------------------------------------------
# Handler registration
# ---------------------------------------------------------------------------

registry.register("checkout.session.completed", CheckoutSessionCompletedWebhook)


# ---------------------------------------------------------------------------
# Webhook endpoint view
# ---------------------------------------------------------------------------


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> JsonResponse:
    """Receive and process a Stripe webhook event.

    Verifies the signature, deduplicates by Stripe event id, persists the
    raw event and dispatches to the registered handler. Once the signature
    is verified the response is always 200, even when the handler fails;
    failures are logged and captured to ``EventProcessingException``.

    Returns:
        400 for a missing or invalid signature, 500 when no webhook secret is
        configured, otherwise 200 ``{"received": true}``.
    """
    sig_header = request.META.get("HTTP_STRIPE_SIGNATURE", "")
    if not sig_header:
        return json_error("Missing Stripe signature", status=400)

    config = get_config()
    webhook_secret = config.stripe.webhook_secret
    if not webhook_secret:
        logger.error("Stripe webhook received but no webhook secret is configured")
        return json_error("Webhook secret not configured", status=500)

    payload = request.body
    try:
        stripe.Webhook.construct_event(
            payload,
            sig_header,
            str(webhook_secret),
            tolerance=config.stripe.webhook_tolerance,
        )
        event = json.loads(payload)
    except (stripe.SignatureVerificationError, ValueError):
        logger.warning("Invalid Stripe webhook payload or signature")
        return json_error("Invalid signature", status=400)
    if not isinstance(event, dict):
        return json_error("Invalid signature", status=400)

    stripe_id = str(event.get("id", ""))
    kind = str(event.get("type", ""))

    if StripeEvent.objects.filter(stripe_id=stripe_id).exists():
        logger.info("Duplicate Stripe event %s, returning 200", stripe_id)
        return JsonResponse({"received": True})

    data_object = _as_dict(_as_dict(event.get("data")).get("object"))
    customer_id = data_object.get("customer") or ""

    stripe_event = StripeEvent.objects.create(
        stripe_id=stripe_id,
        kind=kind,
        livemode=bool(event.get("livemode", False)),
        payload=event,
        customer_id=str(customer_id) if isinstance(customer_id, str) else "",
        api_version=str(event.get("api_version") or ""),
    )

    handler_class = registry.get(kind)
    if handler_class is None:
        logger.info("No handler registered for event kind '%s'", kind)
        return JsonResponse({"received": True})

    try:
        handler_class(stripe_event).process()
    except Exception:
        logger.exception("Error processing Stripe event %s (kind=%s)", stripe_id, kind)
        return JsonResponse({"received": True, "error": "Handler failed"})

    return JsonResponse({"received": True})
