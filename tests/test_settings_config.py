from decimal import Decimal

import pytest
from django.test import override_settings

from conference_site.settings import SHIRT_SIZES, SiteConfig, get_config


def test_get_config_reads_test_settings() -> None:
    config = get_config()
    assert isinstance(config, SiteConfig)
    assert config.stripe.secret_key == "sk_test_conference"
    assert config.dashboard.password == "letmein"
    assert config.speakers == ("Bradley Bennett", "Brooke Kinchen")


def test_get_config_defaults_when_unset() -> None:
    with override_settings(CONFERENCE_SITE={}):
        config = get_config()
    assert config.stripe.secret_key is None
    assert config.dashboard.cookie_name == "admin_auth"
    assert config.dashboard.page_size == 25
    assert config.merch.default_size == "M"
    assert config.features.poll_enabled is True
    assert config.currency == "USD"


def test_get_config_rejects_non_mapping_root() -> None:
    with override_settings(CONFERENCE_SITE=["bad"]):
        with pytest.raises(TypeError, match="must be a mapping"):
            get_config()


def test_get_config_rejects_non_mapping_nested_sections() -> None:
    with override_settings(CONFERENCE_SITE={"stripe": ["bad"]}):
        with pytest.raises(TypeError, match=r"CONFERENCE_SITE\['stripe'\] must be a mapping"):
            get_config()

    with override_settings(CONFERENCE_SITE={"merch": {"price_ids_by_size": ["price_1"]}}):
        with pytest.raises(TypeError, match="price_ids_by_size"):
            get_config()


def test_get_config_validates_primitive_values() -> None:
    with override_settings(CONFERENCE_SITE={"currency": ""}):
        with pytest.raises(ValueError, match="currency"):
            get_config()

    with override_settings(CONFERENCE_SITE={"base_url": "godscoffeecall.com"}):
        with pytest.raises(ValueError, match="base_url"):
            get_config()

    with override_settings(CONFERENCE_SITE={"dashboard": {"page_size": 0}}):
        with pytest.raises(ValueError, match="page_size"):
            get_config()

    with override_settings(CONFERENCE_SITE={"dashboard": {"page_size": 50, "max_page_size": 10}}):
        with pytest.raises(ValueError, match="max_page_size"):
            get_config()

    with override_settings(CONFERENCE_SITE={"donations": {"min_amount": 0}}):
        with pytest.raises(ValueError, match="min_amount"):
            get_config()

    with override_settings(CONFERENCE_SITE={"merch": {"tee_price_cents": -5}}):
        with pytest.raises(ValueError, match="tee_price_cents"):
            get_config()

    with override_settings(CONFERENCE_SITE={"merch": {"default_size": "XXL"}}):
        with pytest.raises(ValueError, match="default_size"):
            get_config()


def test_get_config_coerces_plain_values() -> None:
    with override_settings(
        CONFERENCE_SITE={
            "donations": {"min_amount": "2", "max_amount": 500},
            "merch": {"allowed_countries": ["US"], "price_ids_by_size": {"m": "price_m", "l": ""}},
            "trusted_hosts": ["example.com"],
        }
    ):
        config = get_config()
    assert config.donations.min_amount == Decimal(2)
    assert config.donations.max_amount == Decimal(500)
    assert config.merch.allowed_countries == ("US",)
    assert dict(config.merch.price_ids_by_size) == {"M": "price_m"}
    assert config.trusted_hosts == ("example.com",)


def test_get_config_rejects_unknown_price_sizes() -> None:
    with override_settings(CONFERENCE_SITE={"merch": {"price_ids_by_size": {"XXXXL": "price_x"}}}):
        with pytest.raises(ValueError, match="unknown sizes"):
            get_config()


def test_get_config_cache_clears_on_setting_changed() -> None:
    with override_settings(CONFERENCE_SITE={"currency": "USD"}):
        assert get_config().currency == "USD"

    with override_settings(CONFERENCE_SITE={"currency": "EUR"}):
        assert get_config().currency == "EUR"


def test_shirt_sizes_are_ordered_smallest_first() -> None:
    assert SHIRT_SIZES[0] == "XS"
    assert SHIRT_SIZES[-1] == "3XL"
