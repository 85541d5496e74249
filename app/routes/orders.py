import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session

from app.constants.pricing_tables import CURRENCY_SYMBOLS
from app.database import get_session
from app.exceptions import NotFoundError, ValidationFailed
from app.models.order import Order
from app.schemas.orders_schemas import OrderConfirmation, OrderLine
from app.services import cart_service
from app.services.order_service import get_order_by_public_id, get_order_by_session_id
from app.utils.cart_session import get_cart_id

logger = logging.getLogger(__name__)

router = APIRouter()

DELIVERY_DAYS = 5


def order_confirmation(order: Order) -> OrderConfirmation:
    """Read model built from stored values only; nothing is recalculated."""
    return OrderConfirmation(
        orderNumber=order.public_id,
        sessionId=order.session_id,
        customerEmail=order.customer_email,
        items=[
            OrderLine(name=item.name, quantity=item.quantity, price=item.price)
            for item in order.items
        ],
        country=order.country,
        subtotal=order.subtotal,
        shippingFee=order.shipping_fee,
        tax=order.tax,
        total=order.total,
        totalUSD=order.total_usd,
        currency=order.currency,
        symbol=CURRENCY_SYMBOLS.get(order.currency, ""),
        paymentStatus=order.payment_status,
        orderDate=order.created_at.date().isoformat(),
        estimatedDelivery=(order.created_at + timedelta(days=DELIVERY_DAYS)).date().isoformat(),
    )

# Stripe redirects here; the webhook may not have landed yet

@router.get("/success")
def checkout_success(
    session_id: Optional[str] = None,
    session: Session = Depends(get_session),
):
    if not session_id:
        raise ValidationFailed("session_id is required")

    order = get_order_by_session_id(session, session_id)
    if not order:
        logger.info(f"Waiting for webhook to save order for session {session_id}")
        return JSONResponse(
            status_code=202,
            content={"status": "processing", "message": "We're confirming your order."},
        )

    return {
        "status": "confirmed",
        "orderId": order.public_id,
        "redirect": f"/order-success?id={order.public_id}",
    }

# Final confirmation page

@router.get("/order-success", response_model=OrderConfirmation)
def order_success(
    id: str,
    session: Session = Depends(get_session),
    cart_id: str = Depends(get_cart_id),
):
    order = get_order_by_public_id(session, id)
    if not order:
        raise NotFoundError("Order not found")

    confirmation = order_confirmation(order)

    cart_service.clear_cart(session, cart_id)
    logger.info(f"Cart {cart_id} cleared after order {order.public_id}")

    return confirmation


@router.get("/orders/by-session/{session_id}", response_model=OrderConfirmation)
def order_by_session(session_id: str, session: Session = Depends(get_session)):
    order = get_order_by_session_id(session, session_id)
    if not order:
        raise NotFoundError("Order not found")
    return order_confirmation(order)


@router.get("/orders/{public_id}", response_model=OrderConfirmation)
def order_detail(public_id: str, session: Session = Depends(get_session)):
    order = get_order_by_public_id(session, public_id)
    if not order:
        raise NotFoundError("Order not found")
    return order_confirmation(order)
