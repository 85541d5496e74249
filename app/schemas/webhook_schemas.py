from pydantic import BaseModel
from typing import Any, Dict, Optional

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


class CustomerDetails(BaseModel):
    email: Optional[str] = None


class ShippingAddress(BaseModel):
    country: Optional[str] = None


class ShippingDetails(BaseModel):
    address: Optional[ShippingAddress] = None


class CheckoutSessionObject(BaseModel):
    id: str
    customer_email: Optional[str] = None
    customer_details: Optional[CustomerDetails] = None
    shipping_details: Optional[ShippingDetails] = None
    payment_status: Optional[str] = None
    currency: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class WebhookEvent(BaseModel):
    id: Optional[str] = None
    type: str
    data: Dict[str, Any] = {}

    def session_object(self) -> CheckoutSessionObject:
        return CheckoutSessionObject.model_validate(self.data.get("object") or {})
