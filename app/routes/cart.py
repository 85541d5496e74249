from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.database import get_session
from app.schemas.cart_schemas import (
    CartLineOut,
    CartResponse,
    CartStatusResponse,
    CartUpdateRequest,
)
from app.services import cart_service
from app.services.exchange_rates import get_rate_provider
from app.services.pricing import compute_pricing
from app.utils.cart_session import get_cart_id


router = APIRouter()

# View Cart

@router.get("/api/cart", response_model=CartResponse)
def view_cart(
    session: Session = Depends(get_session),
    cart_id: str = Depends(get_cart_id),
):
    lines = cart_service.get_cart(session, cart_id)

    return CartResponse(
        cart=[CartLineOut.model_validate(line) for line in lines],
        subtotal=cart_service.cart_subtotal(lines),
        itemCount=len(lines),
    )


@router.get("/cart-count")
def cart_count(
    session: Session = Depends(get_session),
    cart_id: str = Depends(get_cart_id),
):
    return {"count": len(cart_service.get_cart(session, cart_id))}

# Display-time estimate, same calculator the checkout session uses

@router.get("/api/pricing")
def pricing_estimate(
    country: str,
    currency: str = "usd",
    session: Session = Depends(get_session),
    cart_id: str = Depends(get_cart_id),
    rate_provider=Depends(get_rate_provider),
):
    lines = cart_service.get_cart(session, cart_id)
    rates = rate_provider.current()
    breakdown = compute_pricing(lines, country, currency, rates)

    return {
        **breakdown.model_dump(by_alias=True),
        "rate": rates.rates[breakdown.currency],
        "rateSource": rates.source,
    }

# Add to Cart

@router.post("/cart/add/{product_id}", response_model=CartStatusResponse, response_model_exclude_none=True)
def add_to_cart(
    product_id: int,
    session: Session = Depends(get_session),
    cart_id: str = Depends(get_cart_id),
):
    cart_service.add_item(session, cart_id, product_id)
    count = len(cart_service.get_cart(session, cart_id))
    return CartStatusResponse(count=count)

# Update Cart

@router.post("/cart/update/{product_id}", response_model=CartStatusResponse, response_model_exclude_none=True)
def update_cart_item(
    product_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    cart_id: str = Depends(get_cart_id),
):
    line = cart_service.update_quantity(session, cart_id, product_id, data.change)
    return CartStatusResponse(quantity=line.quantity)

# Remove Cart

@router.post("/cart/remove/{product_id}", response_model=CartStatusResponse, response_model_exclude_none=True)
def remove_item(
    product_id: int,
    session: Session = Depends(get_session),
    cart_id: str = Depends(get_cart_id),
):
    cart_service.remove_item(session, cart_id, product_id)
    count = len(cart_service.get_cart(session, cart_id))
    return CartStatusResponse(count=count)
