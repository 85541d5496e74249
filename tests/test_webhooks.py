import json
import time

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from app.models import Order, OrderItem
from app.routes import webhooks
from app.services import order_service
from app.services.order_service import create_order_once, draft_from_session
from app.schemas.webhook_schemas import CheckoutSessionObject
from conftest import completed_event, sign_payload


def deliver(client, payload, signature=None):
    return client.post(
        "/webhook",
        content=payload,
        headers={
            "Content-Type": "application/json",
            "Stripe-Signature": signature or sign_payload(payload),
        },
    )


def orders_for(session, session_id):
    return session.exec(select(Order).where(Order.session_id == session_id)).all()


def test_completed_session_creates_order(client, session):
    response = deliver(client, completed_event())

    assert response.status_code == 200
    assert response.json()["received"] is True
    assert "duplicate" not in response.json()

    (order,) = orders_for(session, "cs_test_123")
    assert order.customer_email == "shopper@example.com"
    assert order.country == "US"
    assert order.currency == "usd"
    assert order.subtotal == 50.0
    assert order.shipping_fee == 8.0
    assert order.tax == 4.44
    assert order.total == 62.44
    assert order.total_usd == 62.44
    assert order.payment_status == "paid"
    assert [(i.name, i.quantity, i.price) for i in order.items] == [("Wireless Mouse", 2, 25.0)]


def test_invalid_signature_is_rejected(client, session):
    payload = completed_event()

    response = deliver(client, payload, signature=sign_payload(payload, secret="whsec_wrong"))

    assert response.status_code == 400
    assert orders_for(session, "cs_test_123") == []


def test_missing_signature_is_rejected(client, session):
    response = client.post("/webhook", content=completed_event())

    assert response.status_code == 400
    assert orders_for(session, "cs_test_123") == []


def test_stale_signature_is_rejected(client, session):
    payload = completed_event()

    response = deliver(client, payload, signature=sign_payload(payload, timestamp=int(time.time()) - 3600))

    assert response.status_code == 400
    assert orders_for(session, "cs_test_123") == []


def test_other_event_types_are_ignored(client, session):
    response = deliver(client, completed_event(event_type="payment_intent.created"))

    assert response.status_code == 200
    assert response.json() == {"received": True, "ignored": True}
    assert orders_for(session, "cs_test_123") == []


def test_redelivery_creates_exactly_one_order(client, session):
    payload = completed_event()

    responses = [deliver(client, payload) for _ in range(3)]

    assert [r.status_code for r in responses] == [200, 200, 200]
    assert [r.json().get("duplicate", False) for r in responses] == [False, True, True]
    assert len(orders_for(session, "cs_test_123")) == 1
    assert len(session.exec(select(OrderItem)).all()) == 1


def test_concurrent_insert_is_absorbed_by_unique_constraint(session, monkeypatch):
    checkout = CheckoutSessionObject.model_validate(json.loads(completed_event())["data"]["object"])
    draft = draft_from_session(checkout)
    first, created = create_order_once(session, draft)
    assert created

    # the other delivery passed its existence check before this one committed
    real_lookup = order_service.get_order_by_session_id
    calls = []

    def racing_lookup(db, session_id):
        calls.append(session_id)
        if len(calls) == 1:
            return None
        return real_lookup(db, session_id)

    monkeypatch.setattr(order_service, "get_order_by_session_id", racing_lookup)

    second, created = create_order_once(session, draft)

    assert not created
    assert second.id == first.id
    assert len(orders_for(session, "cs_test_123")) == 1


def test_corrupt_metadata_still_creates_order(client, session):
    metadata = {
        "items": "{not json",
        "country": "KE",
        "currency": "KES",
        "subtotal": "KES 1,300.50",
        "shippingFee": "abc",
        "tax": "208.08",
        "total": "",
    }
    response = deliver(client, completed_event(session_id="cs_corrupt", metadata=metadata))

    assert response.status_code == 200
    (order,) = orders_for(session, "cs_corrupt")
    assert order.items == []
    assert order.subtotal == 1300.50
    assert order.shipping_fee == 0
    assert order.total == 1508.58
    assert order.currency == "kes"
    assert order.total_usd == round(1508.58 / 130, 2)


def test_missing_metadata_defaults_to_zero_pricing(client, session):
    payload = completed_event(
        session_id="cs_bare",
        metadata={},
        currency="eur",
        customer_email=None,
        customer_details={"email": "details@example.com"},
        shipping_details={"address": {"country": "FR"}},
        payment_status=None,
    )

    response = deliver(client, payload)

    assert response.status_code == 200
    (order,) = orders_for(session, "cs_bare")
    assert order.items == []
    assert order.total == 0
    assert order.currency == "eur"
    assert order.country == "FR"
    assert order.customer_email == "details@example.com"
    assert order.payment_status == "unpaid"


def test_legacy_country_key_and_unknown_email(client, session):
    metadata = {"user_country": "GB", "total": "20", "currency": "gbp"}
    payload = completed_event(session_id="cs_legacy", metadata=metadata, customer_email=None)

    deliver(client, payload)

    (order,) = orders_for(session, "cs_legacy")
    assert order.country == "GB"
    assert order.customer_email == "N/A"
    assert order.total_usd == 25.0


def test_persistence_failure_asks_provider_to_retry(client, session, monkeypatch):
    def broken_store(db, draft):
        raise OperationalError("INSERT INTO order", {}, Exception("database is locked"))

    monkeypatch.setattr(webhooks, "create_order_once", broken_store)

    response = deliver(client, completed_event())

    assert response.status_code == 500
    assert response.json() == {"error": "Error processing order"}
    assert orders_for(session, "cs_test_123") == []


@pytest.mark.parametrize("payload", ["not json", json.dumps({"data": {}})])
def test_malformed_event_is_rejected(client, payload):
    response = deliver(client, payload)

    assert response.status_code == 400
