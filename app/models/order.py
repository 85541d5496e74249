from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime
from uuid import uuid4

from app.models.order_item import OrderItem

class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    # unguessable id for confirmation links; the integer key stays internal
    public_id: str = Field(default_factory=lambda: uuid4().hex, unique=True, index=True)

    # provider checkout session id; the unique index is what makes
    # webhook redelivery converge to a single order
    session_id: str = Field(unique=True, index=True)
    customer_email: str = Field(default="N/A")

    country: str = Field(default="Unknown")
    currency: str = Field(default="usd")

    subtotal: float = 0
    shipping_fee: float = 0
    tax: float = 0
    total: float = 0
    total_usd: float = 0
    exchange_rate: float = 1

    payment_status: str = Field(default="unpaid")

    created_at: datetime = Field(default_factory=datetime.utcnow)

    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderItem.position"},
    )
