"""
Pricing calculator.

``compute_pricing`` is a pure function of (cart lines, country, currency,
rate table). The cart page estimate and the checkout session both call it,
so identical inputs must always give identical output; all money math is
done in ``Decimal`` and rounded half-up to cents.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from app.constants.pricing_tables import (
    FREE_SHIPPING_THRESHOLD_USD,
    HALF_SHIPPING_THRESHOLD_USD,
    SHIPPING_RATES,
    SUPPORTED_CURRENCIES,
    TAX_RATES,
)
from app.exceptions import ValidationFailed
from app.schemas.pricing_schemas import PricingBreakdown, RateTable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(value) -> Decimal:
    return Decimal(str(value))


def _round(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_country(country: str) -> str:
    return (country or "").strip().upper() or "DEFAULT"


def normalize_currency(currency: str) -> str:
    code = (currency or "").strip().lower()
    if code not in SUPPORTED_CURRENCIES:
        raise ValidationFailed(f"Unsupported currency: {currency}")
    return code


def to_minor_units(amount) -> int:
    """Integer amount in cents (or the currency's minor unit) for the provider."""
    return int((_money(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def subtotal_usd(lines: Iterable) -> Decimal:
    return sum(
        (_money(line.unit_price_usd) * line.quantity for line in lines),
        ZERO,
    )


def shipping_fee_for(country: str, currency: str, cart_subtotal_usd: Decimal) -> Decimal:
    row = SHIPPING_RATES.get(country, SHIPPING_RATES["DEFAULT"])
    fee = _money(row.get(currency, row["usd"]))

    if cart_subtotal_usd >= FREE_SHIPPING_THRESHOLD_USD:
        return ZERO
    if cart_subtotal_usd >= HALF_SHIPPING_THRESHOLD_USD:
        fee = fee / 2

    return _round(fee)


def tax_rate_for(country: str) -> Decimal:
    return _money(TAX_RATES.get(country, TAX_RATES["DEFAULT"]))


def _converted_unit(price_usd, currency: str, rates: RateTable) -> Decimal:
    return _round(_money(price_usd) * rates.rate_for(currency))


def convert_unit_price(price_usd: float, currency: str, rates: RateTable) -> float:
    return float(_converted_unit(price_usd, currency, rates))


def converted_subtotal(lines: Iterable, currency: str, rates: RateTable) -> Decimal:
    """Sum of the per-unit converted prices times quantity, i.e. what the provider charges."""
    return sum(
        (_converted_unit(line.unit_price_usd, currency, rates) * line.quantity for line in lines),
        ZERO,
    )


def compute_pricing(
    lines: Iterable,
    country: str,
    currency: str,
    rates: RateTable,
) -> PricingBreakdown:
    lines = list(lines)
    country = normalize_country(country)
    currency = normalize_currency(currency)

    base_subtotal = subtotal_usd(lines)
    subtotal = converted_subtotal(lines, currency, rates)

    shipping = shipping_fee_for(country, currency, base_subtotal)
    tax = _round(subtotal * tax_rate_for(country))
    total = _round(subtotal + shipping + tax)

    return PricingBreakdown(
        subtotal=float(subtotal),
        shipping_fee=float(shipping),
        tax=float(tax),
        total=float(total),
        currency=currency,
    )
