"""Django app configuration for the registration app."""

from django.apps import AppConfig


class ConferenceSiteRegistrationConfig(AppConfig):
    """Configuration for the registration app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "conference_site.registration"
    label = "site_registration"
    verbose_name = "Registration"
