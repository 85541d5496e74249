import json
import logging
from typing import Dict, List

from sqlmodel import Session

from app.config import settings
from app.exceptions import ValidationFailed
from app.models.cart import CartLine
from app.schemas.checkout_schemas import CheckoutRequest, CheckoutSession, ProviderLineItem
from app.schemas.pricing_schemas import PricingBreakdown, RateTable
from app.services import cart_service
from app.services.pricing import (
    compute_pricing,
    convert_unit_price,
    normalize_country,
    to_minor_units,
)

logger = logging.getLogger(__name__)

# Stripe caps each metadata value at 500 characters
METADATA_VALUE_LIMIT = 500


def build_line_items(
    lines: List[CartLine],
    breakdown: PricingBreakdown,
    country: str,
    rates: RateTable,
) -> List[ProviderLineItem]:
    currency = breakdown.currency

    items = [
        ProviderLineItem(
            name=line.name,
            unit_amount=to_minor_units(convert_unit_price(line.unit_price_usd, currency, rates)),
            quantity=line.quantity,
        )
        for line in lines
    ]

    items.append(ProviderLineItem(
        name=f"Shipping Fee ({country})",
        unit_amount=to_minor_units(breakdown.shipping_fee),
        quantity=1,
    ))

    if breakdown.tax > 0:
        items.append(ProviderLineItem(
            name="Tax",
            unit_amount=to_minor_units(breakdown.tax),
            quantity=1,
        ))

    return items


def build_metadata(
    lines: List[CartLine],
    breakdown: PricingBreakdown,
    country: str,
    rates: RateTable,
) -> Dict[str, str]:
    """Everything the completion webhook needs to rebuild the order."""
    currency = breakdown.currency
    items_json = json.dumps(
        [
            {
                "name": line.name,
                "quantity": line.quantity,
                "price": convert_unit_price(line.unit_price_usd, currency, rates),
            }
            for line in lines
        ],
        separators=(",", ":"),
    )

    metadata = {
        "country": country,
        "currency": currency,
        "subtotal": str(breakdown.subtotal),
        "shippingFee": str(breakdown.shipping_fee),
        "tax": str(breakdown.tax),
        "total": str(breakdown.total),
        "rate": str(rates.rates[currency]),
    }

    chunks = [
        items_json[i:i + METADATA_VALUE_LIMIT]
        for i in range(0, len(items_json), METADATA_VALUE_LIMIT)
    ] or ["[]"]
    metadata["items"] = chunks[0]
    for index, chunk in enumerate(chunks[1:], start=1):
        metadata[f"items_{index}"] = chunk

    return metadata


def start_checkout(
    session: Session,
    cart_id: str,
    request: CheckoutRequest,
    rate_provider,
    gateway,
) -> CheckoutSession:
    lines = cart_service.get_cart(session, cart_id)
    if not lines:
        raise ValidationFailed("cart empty")

    if not (request.country or "").strip() or not (request.currency or "").strip():
        raise ValidationFailed("missing destination")

    country = normalize_country(request.country)
    rates = rate_provider.current()
    breakdown = compute_pricing(lines, country, request.currency, rates)

    if request.total is not None and abs(request.total - breakdown.total) > 0.01:
        logger.warning(
            f"Client estimate {request.total} differs from server total "
            f"{breakdown.total} for cart {cart_id}; charging server total"
        )

    return gateway.create_checkout_session(
        line_items=build_line_items(lines, breakdown, country, rates),
        currency=breakdown.currency,
        success_url=f"{settings.domain}/success?session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=f"{settings.domain}/cancel",
        metadata=build_metadata(lines, breakdown, country, rates),
    )
