import hashlib
import hmac
import json
import os
import time

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["ADMIN_PASSWORD"] = "letmein"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.database import get_session
from app.main import app
from app.models import CartLine, Product
from app.services.exchange_rates import StaticRateProvider, get_rate_provider
from app.services.payment_service import PaymentGateway, get_payment_gateway

WEBHOOK_SECRET = "whsec_test_secret"


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def completed_event(session_id="cs_test_123", metadata=None, event_type="checkout.session.completed", **session_fields):
    session_object = {
        "id": session_id,
        "object": "checkout.session",
        "customer_email": "shopper@example.com",
        "payment_status": "paid",
        "currency": "usd",
        "metadata": metadata if metadata is not None else {
            "items": json.dumps([{"name": "Wireless Mouse", "quantity": 2, "price": 25.0}]),
            "country": "US",
            "currency": "usd",
            "subtotal": "50.0",
            "shippingFee": "8.0",
            "tax": "4.44",
            "total": "62.44",
            "rate": "1.0",
        },
    }
    session_object.update(session_fields)
    return json.dumps({
        "id": "evt_test_1",
        "object": "event",
        "type": event_type,
        "data": {"object": session_object},
    })


def line(price, quantity=1, name="Item"):
    return CartLine(cart_id="test", product_id=1, name=name, unit_price_usd=price, quantity=quantity)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_product(session):
    def _make(name="Wireless Mouse", price=25.0, stock=10):
        product = Product(name=name, description=f"{name} description", price=price, stock=stock)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product
    return _make


@pytest.fixture
def gateway():
    return PaymentGateway(
        api_key="sk_test_dummy",
        webhook_secret=WEBHOOK_SECRET,
        timeout=5,
        tolerance=300,
    )


@pytest.fixture
def client(engine, gateway):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_rate_provider] = lambda: StaticRateProvider()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    yield TestClient(app)

    app.dependency_overrides.clear()
