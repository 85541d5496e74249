import logging
from typing import Dict, List

import stripe

from app.config import settings
from app.exceptions import InvalidSignatureError, PaymentSessionError
from app.schemas.checkout_schemas import CheckoutSession, ProviderLineItem

logger = logging.getLogger(__name__)


class PaymentGateway:
    """Thin wrapper around Stripe Checkout and webhook signatures."""

    def __init__(self, api_key: str, webhook_secret: str, timeout: int, tolerance: int):
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.tolerance = tolerance

        # no automatic retries: the shopper retries by pressing the button again
        stripe.max_network_retries = 0
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    def create_checkout_session(
        self,
        *,
        line_items: List[ProviderLineItem],
        currency: str,
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
    ) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.api_key,
                payment_method_types=["card"],
                mode="payment",
                currency=currency,
                line_items=[
                    {
                        "price_data": {
                            "currency": currency,
                            "product_data": {"name": item.name},
                            "unit_amount": item.unit_amount,
                        },
                        "quantity": item.quantity,
                    }
                    for item in line_items
                ],
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.exception(f"Stripe session error: {e}")
            raise PaymentSessionError()

        logger.info(f"Checkout session {session.id} created ({currency.upper()})")

        return CheckoutSession(
            session_id=session.id,
            redirect_url=session.url,
            line_items=line_items,
            metadata=metadata,
        )

    def verify_webhook(self, payload: bytes, signature: str):
        """Raise InvalidSignatureError unless the payload was signed with our webhook secret."""
        if not signature:
            raise InvalidSignatureError("Missing Stripe-Signature header")

        try:
            stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"),
                signature,
                self.webhook_secret,
                tolerance=self.tolerance,
            )
        except (stripe.SignatureVerificationError, UnicodeDecodeError) as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise InvalidSignatureError()


payment_gateway = PaymentGateway(
    api_key=settings.stripe_secret_key,
    webhook_secret=settings.stripe_webhook_secret,
    timeout=settings.stripe_timeout_seconds,
    tolerance=settings.stripe_webhook_tolerance,
)


def get_payment_gateway():
    return payment_gateway
