"""Django app configuration for the payments app."""

from django.apps import AppConfig


class ConferenceSitePaymentsConfig(AppConfig):
    """Configuration for the payments app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "conference_site.payments"
    label = "site_payments"
    verbose_name = "Payments"
