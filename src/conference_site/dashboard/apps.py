"""Django app configuration for the admin dashboard."""

from django.apps import AppConfig


class ConferenceSiteDashboardConfig(AppConfig):
    """Configuration for the password-gated admin dashboard."""

    name = "conference_site.dashboard"
    label = "site_dashboard"
    verbose_name = "Dashboard"
