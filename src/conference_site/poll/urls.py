"""URL configuration for the poll app.

Mount at the site root::

    urlpatterns = [
        path("", include("conference_site.poll.urls")),
    ]
"""

from django.urls import path

from conference_site.poll.views import PollAPIView, PollView

app_name = "poll"

urlpatterns = [
    path("poll/", PollView.as_view(), name="poll"),
    path("api/poll/", PollAPIView.as_view(), name="api-poll"),
]
