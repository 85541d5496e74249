import logging
from datetime import datetime
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.exceptions import NotFoundError, OutOfStockError
from app.models.cart import CartLine
from app.models.product import Product

logger = logging.getLogger(__name__)


def get_cart(session: Session, cart_id: str) -> List[CartLine]:
    return session.exec(
        select(CartLine)
        .where(CartLine.cart_id == cart_id)
        .order_by(CartLine.id)
    ).all()


def cart_subtotal(lines: List[CartLine]) -> float:
    return sum(line.line_total for line in lines)


def _get_line(session: Session, cart_id: str, product_id: int):
    return session.exec(
        select(CartLine).where(
            CartLine.cart_id == cart_id,
            CartLine.product_id == product_id,
        )
    ).first()


def _refresh_snapshot(line: CartLine, product: Product):
    line.name = product.name
    line.unit_price_usd = product.price
    line.image = product.image
    line.stock = product.stock
    line.updated_at = datetime.utcnow()


def _stock_message(stock: int) -> str:
    return f"Only {stock} items available in stock."


def add_item(session: Session, cart_id: str, product_id: int) -> CartLine:
    """Add one unit of a product, re-checking stock against the catalog."""
    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")

    if product.stock <= 0:
        raise OutOfStockError()

    line = _get_line(session, cart_id, product_id)

    if line:
        if line.quantity >= product.stock:
            raise OutOfStockError(_stock_message(product.stock))
        line.quantity += 1
    else:
        line = CartLine(cart_id=cart_id, product_id=product.id, quantity=1,
                        name=product.name, unit_price_usd=product.price)

    _refresh_snapshot(line, product)
    session.add(line)

    try:
        session.commit()
    except IntegrityError:
        # another request created the same line first; apply ours as an increment
        session.rollback()
        logger.info(f"Cart line for product {product_id} created concurrently, retrying as update")
        line = _get_line(session, cart_id, product_id)
        if line.quantity >= product.stock:
            raise OutOfStockError(_stock_message(product.stock))
        line.quantity += 1
        _refresh_snapshot(line, product)
        session.add(line)
        session.commit()

    session.refresh(line)
    return line


def update_quantity(session: Session, cart_id: str, product_id: int, change: int) -> CartLine:
    """Apply a +/- change, clamping the result to [1, current stock]."""
    line = _get_line(session, cart_id, product_id)
    if not line:
        raise NotFoundError("Item not found in cart")

    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")

    if product.stock <= 0:
        raise OutOfStockError()

    requested = line.quantity + change
    line.quantity = max(1, min(requested, product.stock))
    if line.quantity != requested:
        logger.info(f"Cart quantity for product {product_id} clamped from {requested} to {line.quantity}")

    _refresh_snapshot(line, product)
    session.add(line)
    session.commit()
    session.refresh(line)
    return line


def remove_item(session: Session, cart_id: str, product_id: int):
    line = _get_line(session, cart_id, product_id)
    if not line:
        raise NotFoundError("Item not found in cart")

    session.delete(line)
    session.commit()


def clear_cart(session: Session, cart_id: str):
    items = session.exec(
        select(CartLine).where(CartLine.cart_id == cart_id)
    ).all()

    for item in items:
        session.delete(item)

    session.commit()
