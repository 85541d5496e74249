from pydantic import BaseModel
from typing import Dict, List


class OrderItemDraft(BaseModel):
    name: str
    quantity: int
    price: float


class OrderDraft(BaseModel):
    session_id: str
    customer_email: str
    country: str
    currency: str
    subtotal: float
    shipping_fee: float
    tax: float
    total: float
    total_usd: float
    exchange_rate: float
    payment_status: str
    items: List[OrderItemDraft]


class OrderLine(BaseModel):
    name: str
    quantity: int
    price: float


class OrderConfirmation(BaseModel):
    orderNumber: str
    sessionId: str
    customerEmail: str
    items: List[OrderLine]
    country: str
    subtotal: float
    shippingFee: float
    tax: float
    total: float
    totalUSD: float
    currency: str
    symbol: str
    paymentStatus: str
    orderDate: str
    estimatedDelivery: str


class AdminOrderRow(BaseModel):
    orderNumber: str
    sessionId: str
    customerEmail: str
    country: str
    currency: str
    total: float
    totalUSD: float
    paymentStatus: str
    createdAt: str


class AdminDashboard(BaseModel):
    totalOrders: int
    totalRevenueUSD: float
    currencyTotals: Dict[str, float]
    orders: List[AdminOrderRow]
