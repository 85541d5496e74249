# app/schemas/checkout_schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional


class CheckoutItem(BaseModel):
    name: str
    quantity: int
    price: float          # per unit, in the checkout currency


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # what the shopper saw; line items are rebuilt from the server-side cart
    items: List[CheckoutItem] = []
    country: Optional[str] = None
    currency: Optional[str] = None

    subtotal: Optional[float] = None
    shipping_fee: Optional[float] = Field(default=None, alias="shippingFee")
    tax: Optional[float] = None
    total: Optional[float] = None


class ProviderLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    unit_amount: int      # minor units (cents)
    quantity: int


class CheckoutSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str
    redirect_url: str
    line_items: List[ProviderLineItem]
    metadata: Dict[str, str]


class CheckoutResponse(BaseModel):
    url: str
    sessionId: str
