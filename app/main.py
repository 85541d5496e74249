import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.database import create_db_and_tables
from app.exceptions import StorefrontError
from app.routes import (
    admin_orders,
    cart,
    checkout,
    health,
    orders,
    webhooks,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Storefront Checkout API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Something went wrong"})


app.include_router(cart.router, tags=["Cart"])
app.include_router(checkout.router, tags=["Checkout"])
app.include_router(webhooks.router, tags=["Webhooks"])
app.include_router(orders.router, tags=["Orders"])
app.include_router(admin_orders.router, prefix="/admin/orders", tags=["Admin Orders"])
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/")
def root():
    return {
        "cart_endpoints": [
            "/api/cart", "/cart-count", "/api/pricing",
            "/cart/add/{product_id}", "/cart/update/{product_id}",
            "/cart/remove/{product_id}"
        ],
        "checkout_endpoints": [
            "/create-checkout-session", "/cancel", "/webhook"
        ],
        "order_endpoints": [
            "/success", "/order-success", "/orders/{public_id}",
            "/orders/by-session/{session_id}"
        ],
        "admin_endpoints": [
            "/admin/orders"
        ]
    }
