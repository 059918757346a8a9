"""Root URL configuration for conference-site.

Include everything at the site root of the host project::

    urlpatterns = [
        path("admin/", admin.site.urls),
        path("", include("conference_site.urls")),
    ]
"""

from django.urls import include, path

from conference_site.views import CancelView, HealthView, HomeView, ThankYouView

pages_patterns = (
    [
        path("", HomeView.as_view(), name="home"),
        path("thank-you/", ThankYouView.as_view(), name="thank-you"),
        path("cancel/", CancelView.as_view(), name="cancel"),
        path("api/health/", HealthView.as_view(), name="health"),
    ],
    "pages",
)

urlpatterns = [
    path("", include(pages_patterns)),
    path("", include("conference_site.registration.urls")),
    path("", include("conference_site.payments.urls")),
    path("", include("conference_site.poll.urls")),
    path("dashboard/", include("conference_site.dashboard.urls")),
]
