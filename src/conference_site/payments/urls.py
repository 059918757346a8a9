"""URL configuration for the payments app.

JSON checkout endpoints, the Stripe webhook and the donate/merch pages.
Mount at the site root::

    urlpatterns = [
        path("", include("conference_site.payments.urls")),
    ]
"""

from django.urls import path

from conference_site.payments.views import DonateView, DonationCheckoutView, MerchView, ShirtCheckoutView
from conference_site.payments.webhooks import stripe_webhook

app_name = "payments"

urlpatterns = [
    path("donate/", DonateView.as_view(), name="donate"),
    path("merch/", MerchView.as_view(), name="merch"),
    path("api/checkout/donation/", DonationCheckoutView.as_view(), name="donation-checkout"),
    path("api/checkout/shirt/", ShirtCheckoutView.as_view(), name="shirt-checkout"),
    path("api/stripe/webhook/", stripe_webhook, name="stripe-webhook"),
]
