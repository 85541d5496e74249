import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.database import get_session
from app.exceptions import StorefrontError, ValidationFailed
from app.schemas.webhook_schemas import CHECKOUT_SESSION_COMPLETED, WebhookEvent
from app.services.order_service import create_order_once, draft_from_session
from app.services.payment_service import get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter()


def handle_completed_session(session: Session, event: WebhookEvent) -> dict:
    try:
        checkout = event.session_object()
    except ValidationError as e:
        raise ValidationFailed(f"Invalid checkout session object: {e.error_count()} errors")

    draft = draft_from_session(checkout)

    try:
        order, created = create_order_once(session, draft)
    except SQLAlchemyError:
        logger.exception(f"Failed to save order for session {checkout.id}")
        # 5xx makes Stripe redeliver the event later
        raise StorefrontError("Error processing order", status_code=500)

    if not created:
        logger.info(f"Order already exists for session {checkout.id}, skipping duplicate")
        return {"received": True, "duplicate": True, "orderId": order.id}

    return {"received": True, "orderId": order.id}


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    session: Session = Depends(get_session),
    gateway=Depends(get_payment_gateway),
):
    payload = await request.body()
    gateway.verify_webhook(payload, request.headers.get("stripe-signature"))

    try:
        event = WebhookEvent.model_validate_json(payload)
    except ValidationError:
        raise ValidationFailed("Invalid webhook payload")

    if event.type != CHECKOUT_SESSION_COMPLETED:
        logger.info(f"Ignored webhook event {event.type}")
        return {"received": True, "ignored": True}

    return await run_in_threadpool(handle_completed_session, session, event)
