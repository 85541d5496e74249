from fastapi.testclient import TestClient

from app.main import app


def test_new_visitor_gets_cart_cookie_and_empty_cart(client):
    response = client.get("/api/cart")

    assert response.status_code == 200
    assert response.json() == {"cart": [], "subtotal": 0, "itemCount": 0}
    assert "cart_id" in response.cookies


def test_add_to_cart(client, make_product):
    product = make_product(price=25.0, stock=5)

    response = client.post(f"/cart/add/{product.id}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "count": 1}

    client.post(f"/cart/add/{product.id}")

    cart = client.get("/api/cart").json()
    assert cart["itemCount"] == 1
    assert cart["subtotal"] == 50.0
    assert cart["cart"][0]["productId"] == product.id
    assert cart["cart"][0]["quantity"] == 2
    assert cart["cart"][0]["price"] == 25.0
    assert cart["cart"][0]["stock"] == 5


def test_add_out_of_stock_product_is_rejected(client, make_product):
    product = make_product(stock=0)

    response = client.post(f"/cart/add/{product.id}")

    assert response.status_code == 400
    assert response.json() == {"error": "Product is out of stock."}
    assert client.get("/api/cart").json()["cart"] == []


def test_add_beyond_stock_is_rejected(client, make_product):
    product = make_product(stock=1)
    client.post(f"/cart/add/{product.id}")

    response = client.post(f"/cart/add/{product.id}")

    assert response.status_code == 400
    assert response.json() == {"error": "Only 1 items available in stock."}
    assert client.get("/api/cart").json()["cart"][0]["quantity"] == 1


def test_add_unknown_product(client):
    response = client.post("/cart/add/999")

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_stock_is_rechecked_against_catalog(client, session, make_product):
    product = make_product(stock=3)
    client.post(f"/cart/add/{product.id}")

    product.stock = 0
    session.add(product)
    session.commit()

    response = client.post(f"/cart/add/{product.id}")
    assert response.status_code == 400
    assert response.json() == {"error": "Product is out of stock."}


def test_update_clamps_to_stock_and_minimum(client, make_product):
    product = make_product(stock=3)
    client.post(f"/cart/add/{product.id}")

    response = client.post(f"/cart/update/{product.id}", json={"change": 5})
    assert response.json() == {"success": True, "quantity": 3}

    response = client.post(f"/cart/update/{product.id}", json={"change": -10})
    assert response.json() == {"success": True, "quantity": 1}


def test_update_refreshes_price_snapshot(client, session, make_product):
    product = make_product(price=10.0, stock=5)
    client.post(f"/cart/add/{product.id}")

    product.price = 12.5
    session.add(product)
    session.commit()

    client.post(f"/cart/update/{product.id}", json={"change": 1})

    cart = client.get("/api/cart").json()
    assert cart["cart"][0]["price"] == 12.5
    assert cart["subtotal"] == 25.0


def test_update_item_not_in_cart(client, make_product):
    product = make_product()

    response = client.post(f"/cart/update/{product.id}", json={"change": 1})

    assert response.status_code == 404
    assert response.json() == {"error": "Item not found in cart"}


def test_update_requires_change(client, make_product):
    product = make_product()
    client.post(f"/cart/add/{product.id}")

    response = client.post(f"/cart/update/{product.id}", json={})

    assert response.status_code == 400
    assert "change" in response.json()["error"]


def test_remove_item(client, make_product):
    keep = make_product(name="Keyboard")
    drop = make_product(name="Mouse")
    client.post(f"/cart/add/{keep.id}")
    client.post(f"/cart/add/{drop.id}")

    response = client.post(f"/cart/remove/{drop.id}")
    assert response.json() == {"success": True, "count": 1}
    assert client.get("/cart-count").json() == {"count": 1}

    response = client.post(f"/cart/remove/{drop.id}")
    assert response.status_code == 404


def test_carts_are_scoped_to_their_cookie(client, make_product):
    product = make_product()
    client.post(f"/cart/add/{product.id}")

    other = TestClient(app)

    assert other.get("/api/cart").json()["itemCount"] == 0
    assert client.get("/api/cart").json()["itemCount"] == 1


def test_pricing_estimate_for_current_cart(client, make_product):
    product = make_product(price=100.0)
    client.post(f"/cart/add/{product.id}")

    response = client.get("/api/pricing", params={"country": "us", "currency": "usd"})

    assert response.status_code == 200
    assert response.json() == {
        "subtotal": 100.0,
        "shippingFee": 4.0,
        "tax": 8.88,
        "total": 112.88,
        "currency": "usd",
        "rate": 1.0,
        "rateSource": "fallback",
    }


def test_pricing_estimate_rejects_unknown_currency(client):
    response = client.get("/api/pricing", params={"country": "US", "currency": "xyz"})

    assert response.status_code == 400
    assert response.json() == {"error": "Unsupported currency: xyz"}
