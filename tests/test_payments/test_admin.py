"""Tests for the payments admin registrations."""

import pytest
from django.contrib import admin
from django.test import RequestFactory

from conference_site.payments.admin import EventProcessingExceptionAdmin, PaymentAdmin, StripeEventAdmin
from conference_site.payments.models import EventProcessingException, Payment, StripeEvent


@pytest.mark.unit
class TestPaymentsAdmin:
    @pytest.mark.parametrize(
        ("model", "admin_class"),
        [
            (Payment, PaymentAdmin),
            (StripeEvent, StripeEventAdmin),
            (EventProcessingException, EventProcessingExceptionAdmin),
        ],
    )
    def test_models_are_registered(self, model, admin_class):
        assert isinstance(admin.site._registry[model], admin_class)

    @pytest.mark.parametrize("model", [StripeEvent, EventProcessingException])
    def test_webhook_records_are_read_only(self, model):
        model_admin = admin.site._registry[model]
        request = RequestFactory().get("/admin/")

        assert model_admin.has_add_permission(request) is False
        assert model_admin.has_change_permission(request) is False
