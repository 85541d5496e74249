"""
Order store and the completion-webhook order builder.

``create_order_once`` is the only write path. The unique index on
``order.session_id`` guarantees a single order per checkout session even
when the provider delivers the completion event several times at once; the
lookup before the insert only saves a round trip in the common case.
"""

import json
import logging
import re
from typing import List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.constants.pricing_tables import FALLBACK_EXCHANGE_RATES
from app.models.order import Order
from app.models.order_item import OrderItem
from app.schemas.orders_schemas import OrderDraft, OrderItemDraft
from app.schemas.webhook_schemas import CheckoutSessionObject

logger = logging.getLogger(__name__)


def clean_amount(value) -> float:
    """Parse a metadata number, dropping currency symbols and separators; 0 if unusable."""
    cleaned = re.sub(r"[^\d.-]", "", str(value if value is not None else "0"))
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def _items_json(metadata: dict) -> str:
    parts = [metadata.get("items") or "[]"]
    index = 1
    while f"items_{index}" in metadata:
        parts.append(metadata[f"items_{index}"])
        index += 1
    return "".join(str(part) for part in parts)


def parse_items(metadata: dict) -> List[OrderItemDraft]:
    try:
        raw = json.loads(_items_json(metadata))
        if not isinstance(raw, list):
            raise ValueError(f"expected a list, got {type(raw).__name__}")
        return [OrderItemDraft.model_validate(item) for item in raw]
    except (ValueError, ValidationError) as e:
        logger.error(f"Failed to parse items metadata: {e}")
        return []


def draft_from_session(checkout: CheckoutSessionObject) -> OrderDraft:
    """Rebuild the order from the metadata attached when the session was created."""
    metadata = checkout.metadata or {}

    subtotal = clean_amount(metadata.get("subtotal"))
    shipping_fee = clean_amount(metadata.get("shippingFee"))
    tax = clean_amount(metadata.get("tax"))
    total = clean_amount(metadata.get("total")) or round(subtotal + shipping_fee + tax, 2)

    currency = str(metadata.get("currency") or checkout.currency or "usd").lower()

    rate = clean_amount(metadata.get("rate"))
    if rate <= 0:
        rate = float(FALLBACK_EXCHANGE_RATES.get(currency, 1))

    shipping_country = None
    if checkout.shipping_details and checkout.shipping_details.address:
        shipping_country = checkout.shipping_details.address.country
    country = (
        metadata.get("country")
        or metadata.get("user_country")
        or shipping_country
        or "Unknown"
    )

    customer_email = checkout.customer_email
    if not customer_email and checkout.customer_details:
        customer_email = checkout.customer_details.email

    return OrderDraft(
        session_id=checkout.id,
        customer_email=customer_email or "N/A",
        country=str(country),
        currency=currency,
        subtotal=subtotal,
        shipping_fee=shipping_fee,
        tax=tax,
        total=total,
        total_usd=round(total / rate, 2),
        exchange_rate=rate,
        payment_status=checkout.payment_status or "unpaid",
        items=parse_items(metadata),
    )


def get_order_by_public_id(session: Session, public_id: str) -> Optional[Order]:
    return session.exec(
        select(Order).where(Order.public_id == public_id)
    ).first()


def get_order_by_session_id(session: Session, session_id: str) -> Optional[Order]:
    return session.exec(
        select(Order).where(Order.session_id == session_id)
    ).first()


def list_orders(session: Session) -> List[Order]:
    return session.exec(
        select(Order).order_by(Order.created_at.desc(), Order.id.desc())
    ).all()


def create_order_once(session: Session, draft: OrderDraft) -> Tuple[Order, bool]:
    """Persist the order unless one already exists for the session. Returns (order, created)."""
    existing = get_order_by_session_id(session, draft.session_id)
    if existing:
        return existing, False

    order = Order(**draft.model_dump(exclude={"items"}))
    order.items = [
        OrderItem(position=position, **item.model_dump())
        for position, item in enumerate(draft.items)
    ]
    session.add(order)

    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        existing = get_order_by_session_id(session, draft.session_id)
        if existing is None:
            raise
        logger.info(f"Order for session {draft.session_id} was created by a concurrent delivery")
        return existing, False

    session.refresh(order)
    logger.info(
        f"Order saved: {order.id} ({order.currency.upper()} {order.total:.2f}) "
        f"for session {order.session_id}"
    )
    return order, True
