from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime

class CartLine(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("cart_id", "product_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    cart_id: str = Field(index=True)
    product_id: int = Field(foreign_key="product.id")

    # snapshot of the product taken at add/update time
    name: str
    unit_price_usd: float
    image: Optional[str] = None
    stock: int = 0

    quantity: int = 1
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def line_total(self) -> float:
        return self.unit_price_usd * self.quantity
