"""URL configuration for the registration app.

Mount at the site root::

    urlpatterns = [
        path("", include("conference_site.registration.urls")),
    ]
"""

from django.urls import path

from conference_site.registration.views import CheckDuplicateView, RegisterAPIView, RegisterView

app_name = "registration"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("api/register/", RegisterAPIView.as_view(), name="api-register"),
    path("api/check-duplicate/", CheckDuplicateView.as_view(), name="check-duplicate"),
]
