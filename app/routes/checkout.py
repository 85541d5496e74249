from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.database import get_session
from app.schemas.checkout_schemas import CheckoutRequest, CheckoutResponse
from app.services.checkout_service import start_checkout
from app.services.exchange_rates import get_rate_provider
from app.services.payment_service import get_payment_gateway
from app.utils.cart_session import get_cart_id

router = APIRouter()


@router.post("/create-checkout-session", response_model=CheckoutResponse)
def create_checkout_session(
    data: CheckoutRequest,
    session: Session = Depends(get_session),
    cart_id: str = Depends(get_cart_id),
    rate_provider=Depends(get_rate_provider),
    gateway=Depends(get_payment_gateway),
):
    checkout = start_checkout(session, cart_id, data, rate_provider, gateway)

    return CheckoutResponse(url=checkout.redirect_url, sessionId=checkout.session_id)


@router.get("/cancel")
def checkout_cancelled():
    return {"status": "cancelled", "message": "Payment cancelled. Your cart is unchanged."}
