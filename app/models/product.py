from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: str = ""

    # prices are stored in USD
    price: float
    image: Optional[str] = None
    category: str = Field(default="Electronics")
    stock: int = 0

    created_at: datetime = Field(default_factory=datetime.utcnow)
