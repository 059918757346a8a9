"""Django admin configuration for the payments app."""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.contrib import admin

from conference_site.payments.models import EventProcessingException, Payment, StripeEvent

if TYPE_CHECKING:
    from django.http import HttpRequest


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Read-only admin for recorded checkout sessions."""

    list_display = ("stripe_id", "kind", "amount", "currency", "name", "email", "shirt_sizes", "created_at")
    list_filter = ("kind", "currency", "payment_status")
    search_fields = ("stripe_id", "email", "name", "shirt_size")
    readonly_fields = (
        "stripe_id",
        "kind",
        "amount_cents",
        "currency",
        "name",
        "email",
        "shirt_size",
        "shirt_sizes",
        "payment_status",
        "registration",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request: HttpRequest) -> bool:  # noqa: ARG002, D102
        return False


@admin.register(StripeEvent)
class StripeEventAdmin(admin.ModelAdmin):
    """Read-only admin for Stripe webhook events."""

    list_display = ("stripe_id", "kind", "processed", "livemode", "created_at")
    list_filter = ("kind", "processed", "livemode")
    search_fields = ("stripe_id", "customer_id")
    readonly_fields = (
        "stripe_id",
        "kind",
        "livemode",
        "payload",
        "customer_id",
        "processed",
        "api_version",
        "created_at",
    )

    def has_add_permission(self, request: HttpRequest) -> bool:  # noqa: ARG002, D102
        return False

    def has_change_permission(self, request: HttpRequest, obj: StripeEvent | None = None) -> bool:  # noqa: ARG002, D102
        return False


@admin.register(EventProcessingException)
class EventProcessingExceptionAdmin(admin.ModelAdmin):
    """Read-only admin for webhook processing errors."""

    list_display = ("message", "event", "created_at")
    search_fields = ("message",)
    readonly_fields = ("event", "data", "message", "traceback", "created_at")

    def has_add_permission(self, request: HttpRequest) -> bool:  # noqa: ARG002, D102
        return False

    def has_change_permission(  # noqa: D102
        self,
        request: HttpRequest,  # noqa: ARG002
        obj: EventProcessingException | None = None,  # noqa: ARG002
    ) -> bool:
        return False
