from decimal import Decimal
from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field


class RateTable(BaseModel):
    """Units of each supported currency per 1 USD, plus where they came from."""

    model_config = ConfigDict(frozen=True)

    rates: Dict[str, float]
    source: Literal["live", "mixed", "fallback"] = "fallback"

    def rate_for(self, currency: str) -> Decimal:
        return Decimal(str(self.rates.get(currency, 1)))


class PricingBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    subtotal: float
    shipping_fee: float = Field(serialization_alias="shippingFee")
    tax: float
    total: float
    currency: str
