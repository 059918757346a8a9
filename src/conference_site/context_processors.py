"""Django context processors for conference-site."""

from django.http import HttpRequest

from conference_site.settings import EventConfig, FeaturesConfig, get_config


def site_context(request: HttpRequest) -> dict[str, FeaturesConfig | EventConfig]:  # noqa: ARG001
    """Expose feature toggle flags and event details to templates.

    Add ``"conference_site.context_processors.site_context"`` to the
    ``context_processors`` list in your ``TEMPLATES`` setting.

    Usage in templates::

        {% if site_features.donations_enabled %}
            <a href="{% url 'payments:donate' %}">Donate</a>
        {% endif %}
        <p>{{ event.dates }} at {{ event.venue }}</p>
    """
    config = get_config()
    return {"site_features": config.features, "event": config.event}
