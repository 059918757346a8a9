"""URL configuration for the admin dashboard.

Mount under a prefix in the host project::

    urlpatterns = [
        path("dashboard/", include("conference_site.dashboard.urls")),
    ]
"""

from django.urls import path

from conference_site.dashboard.views import (
    LoginView,
    LogoutView,
    OverviewView,
    PaymentsAPIView,
    PaymentsExportView,
    PaymentsView,
    PollAdminAPIView,
    PollExportView,
    PollResultsView,
    RegistrationsAPIView,
    RegistrationsExportView,
    StatsAPIView,
)

app_name = "dashboard"

urlpatterns = [
    path("", OverviewView.as_view(), name="overview"),
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("payments/", PaymentsView.as_view(), name="payments"),
    path("poll/", PollResultsView.as_view(), name="poll"),
    path("api/registrations/", RegistrationsAPIView.as_view(), name="api-registrations"),
    path("api/payments/", PaymentsAPIView.as_view(), name="api-payments"),
    path("api/poll/", PollAdminAPIView.as_view(), name="api-poll"),
    path("api/stats/", StatsAPIView.as_view(), name="api-stats"),
    path("export/registrations.csv", RegistrationsExportView.as_view(), name="export-registrations"),
    path("export/payments.csv", PaymentsExportView.as_view(), name="export-payments"),
    path("export/poll.csv", PollExportView.as_view(), name="export-poll"),
]
