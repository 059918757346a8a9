"""Money helpers for Stripe amounts.

Stripe takes and reports amounts as integers in the currency's smallest
unit: cents for USD, whole yen for JPY. Donations are entered in dollars and
payments are shown in dollars, so these helpers sit on both edges.
"""

from decimal import ROUND_HALF_UP, Decimal

_VISIBLE_KEY_CHARS = 4

# Currencies without a minor unit; Stripe takes their amounts as-is.
ZERO_DECIMAL_CURRENCIES: frozenset[str] = frozenset(
    {
        "BIF",
        "CLP",
        "DJF",
        "GNF",
        "JPY",
        "KMF",
        "KRW",
        "MGA",
        "PYG",
        "RWF",
        "UGX",
        "VND",
        "VUV",
        "XAF",
        "XOF",
        "XPF",
    }
)


def _is_zero_decimal(currency: str) -> bool:
    return currency.upper() in ZERO_DECIMAL_CURRENCIES


def convert_amount_for_api(amount: Decimal, currency: str) -> int:
    """Return *amount* in the smallest unit of *currency*.

    ``Decimal("25.50")`` USD becomes ``2550``. Sub-cent fractions round
    half-up, so ``Decimal("0.005")`` becomes ``1``.

    Args:
        amount: Amount in major units.
        currency: ISO 4217 code, any case.

    Returns:
        The integer amount Stripe expects.
    """
    scaled = amount if _is_zero_decimal(currency) else amount * 100
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def convert_amount_for_db(amount: int, currency: str) -> Decimal:
    """Return a Stripe integer amount in major units (``2550`` -> ``Decimal("25.50")``)."""
    if _is_zero_decimal(currency):
        return Decimal(str(amount))
    return (Decimal(str(amount)) / 100).quantize(Decimal("0.01"))


def clamp_amount_for_api(amount: Decimal, minimum: Decimal, maximum: Decimal, currency: str) -> int:
    """Clamp a user-entered amount into ``[minimum, maximum]`` and convert it for Stripe.

    Args:
        amount: The amount entered by the donor, in major units.
        minimum: Smallest accepted amount, in major units.
        maximum: Largest accepted amount, in major units.
        currency: ISO 4217 code, any case.

    Returns:
        The clamped amount in the smallest currency unit.
    """
    return convert_amount_for_api(min(max(amount, minimum), maximum), currency)


def obfuscate_key(key: str) -> str:
    """Mask a secret key for log output, keeping only its last four characters."""
    if len(key) < _VISIBLE_KEY_CHARS:
        return "****"
    return f"****{key[-_VISIBLE_KEY_CHARS:]}"
