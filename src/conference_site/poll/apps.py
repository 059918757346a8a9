"""Django app configuration for the poll app."""

from django.apps import AppConfig


class ConferenceSitePollConfig(AppConfig):
    """Configuration for the speaker poll app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "conference_site.poll"
    label = "site_poll"
    verbose_name = "Speaker Poll"
