from decimal import Decimal

import pytest

from conference_site.payments.stripe_utils import (
    ZERO_DECIMAL_CURRENCIES,
    clamp_amount_for_api,
    convert_amount_for_api,
    convert_amount_for_db,
    obfuscate_key,
)


def test_zero_decimal_currencies_include_yen():
    assert "JPY" in ZERO_DECIMAL_CURRENCIES
    assert "USD" not in ZERO_DECIMAL_CURRENCIES


@pytest.mark.parametrize(
    ("amount", "currency", "expected"),
    [
        (Decimal("25"), "usd", 2500),
        (Decimal("25.50"), "USD", 2550),
        (Decimal("0.005"), "usd", 1),
        (Decimal("0.004"), "usd", 0),
        (Decimal("500"), "jpy", 500),
        (Decimal("499.5"), "JPY", 500),
    ],
)
def test_convert_amount_for_api(amount, currency, expected):
    assert convert_amount_for_api(amount, currency) == expected


@pytest.mark.parametrize(
    ("amount", "currency", "expected"),
    [
        (2550, "usd", Decimal("25.50")),
        (1, "USD", Decimal("0.01")),
        (0, "usd", Decimal("0.00")),
        (500, "jpy", Decimal(500)),
    ],
)
def test_convert_amount_for_db(amount, currency, expected):
    assert convert_amount_for_db(amount, currency) == expected


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (Decimal("0.50"), 100),
        (Decimal("1"), 100),
        (Decimal("42.42"), 4242),
        (Decimal("1000000"), 10000000),
    ],
)
def test_clamp_amount_for_api(amount, expected):
    assert clamp_amount_for_api(amount, Decimal(1), Decimal(100000), "usd") == expected


def test_obfuscate_key_keeps_last_four():
    assert obfuscate_key("sk_test_abcd1234") == "****1234"


def test_obfuscate_key_masks_short_keys():
    assert obfuscate_key("abc") == "****"
