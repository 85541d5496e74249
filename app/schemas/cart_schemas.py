from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class CartUpdateRequest(BaseModel):
    change: int


class CartLineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    product_id: int = Field(serialization_alias="productId")
    name: str
    price: float = Field(validation_alias="unit_price_usd")
    image: Optional[str] = None
    stock: int
    quantity: int


class CartResponse(BaseModel):
    cart: List[CartLineOut]
    subtotal: float
    itemCount: int


class CartStatusResponse(BaseModel):
    success: bool = True
    count: Optional[int] = None
    quantity: Optional[int] = None
