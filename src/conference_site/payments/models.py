"""Payment and Stripe webhook models for conference-site."""

from decimal import Decimal

from django.db import models

from conference_site.payments.stripe_utils import convert_amount_for_db


class Payment(models.Model):
    """A completed Stripe Checkout session.

    Rows are keyed by the Checkout Session id (``stripe_id``) so a
    redelivered webhook never records the same payment twice. Amounts are
    kept in the smallest currency unit exactly as Stripe reports them.
    """

    class Kind(models.TextChoices):
        """What the checkout session paid for."""

        DONATION = "donation", "Donation"
        SHIRT = "shirt", "Shirt"

    stripe_id = models.CharField(max_length=255, unique=True)
    kind = models.CharField(max_length=20, choices=Kind.choices, db_index=True)
    amount_cents = models.PositiveBigIntegerField(default=0)
    currency = models.CharField(max_length=3, default="usd")
    name = models.CharField(max_length=200, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    shirt_size = models.CharField(
        max_length=8,
        blank=True,
        default="",
        help_text="First size of a shirt order.",
    )
    shirt_sizes = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text='Every size of a shirt order, comma-separated (e.g. "M,L,L").',
    )
    payment_status = models.CharField(max_length=30, blank=True, default="")
    registration = models.ForeignKey(
        "site_registration.Registration",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments",
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.kind} {self.amount} {self.currency.upper()} ({self.stripe_id})"

    @property
    def amount(self) -> Decimal:
        """Return the amount in major currency units."""
        return convert_amount_for_db(self.amount_cents, self.currency or "usd")


class StripeEvent(models.Model):
    """A raw Stripe webhook event, stored once per Stripe event id."""

    stripe_id = models.CharField(max_length=255, unique=True)
    kind = models.CharField(max_length=100, db_index=True)
    livemode = models.BooleanField(default=False)
    payload = models.JSONField(default=dict)
    customer_id = models.CharField(max_length=255, blank=True, default="")
    processed = models.BooleanField(default=False)
    api_version = models.CharField(max_length=50, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.kind} ({self.stripe_id})"


class EventProcessingException(models.Model):
    """A failure captured while handling a Stripe webhook event."""

    event = models.ForeignKey(
        StripeEvent,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="exceptions",
    )
    data = models.TextField(blank=True, default="")
    message = models.CharField(max_length=500)
    traceback = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.message
