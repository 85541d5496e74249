# -------- ADMIN ORDERS --------
from collections import defaultdict
from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.database import get_session
from app.dependencies.admin import require_admin
from app.schemas.orders_schemas import AdminDashboard, AdminOrderRow
from app.services.order_service import list_orders


router = APIRouter()


@router.get("", response_model=AdminDashboard)
def orders_dashboard(
    session: Session = Depends(get_session),
    _: bool = Depends(require_admin),
):
    orders = list_orders(session)

    currency_totals = defaultdict(float)
    for o in orders:
        currency_totals[(o.currency or "usd").lower()] += o.total or 0

    return AdminDashboard(
        totalOrders=len(orders),
        totalRevenueUSD=round(sum(o.total_usd or 0 for o in orders), 2),
        currencyTotals={c: round(t, 2) for c, t in currency_totals.items()},
        orders=[
            AdminOrderRow(
                orderNumber=o.public_id,
                sessionId=o.session_id,
                customerEmail=o.customer_email,
                country=o.country,
                currency=o.currency,
                total=o.total,
                totalUSD=o.total_usd,
                paymentStatus=o.payment_status,
                createdAt=o.created_at.isoformat(),
            )
            for o in orders
        ],
    )
