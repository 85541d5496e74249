from uuid import uuid4
from fastapi import Request, Response
from app.config import settings


def get_cart_id(request: Request, response: Response) -> str:
    """
    Key of the caller's cart, taken from the cart cookie.
    A new key is issued (and the cookie set) on first visit.
    """
    cart_id = request.cookies.get(settings.cart_cookie_name)

    if not cart_id:
        cart_id = uuid4().hex
        response.set_cookie(
            settings.cart_cookie_name,
            cart_id,
            httponly=True,
            samesite="lax",
            secure=settings.env == "production",
        )

    return cart_id
