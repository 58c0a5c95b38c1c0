from src.utils.status import Status


def _setup(make_user, make_product, login):
    make_user()
    apple = make_product("Apple", quantity=5, price="1.50")
    milk = make_product("Milk", quantity=1, price="3.00", category="Drinks")
    return apple, milk, login()


def test_cart_requires_login(client):
    assert client.get("/cart").status_code == 401
    assert client.post("/cart/items", json={"product_id": 1, "quantity": 1}).status_code == 401


def test_add_view_and_remove(client, make_user, make_product, login):
    apple, milk, headers = _setup(make_user, make_product, login)

    added = client.post("/cart/items", headers=headers, json={"product_id": apple, "quantity": 2})
    assert added.status_code == 200
    assert added.json()["data"]["clamped"] is False
    client.post("/cart/items", headers=headers, json={"product_id": milk})

    cart = client.get("/cart", headers=headers).json()["data"]
    assert [(i["product_id"], i["quantity"]) for i in cart["items"]] == [(apple, 2), (milk, 1)]
    assert cart["total"] == "6.00"

    removed = client.delete(f"/cart/items/{apple}", headers=headers)
    assert removed.status_code == 200
    assert removed.json()["data"]["total"] == "3.00"
    assert client.delete(f"/cart/items/{apple}", headers=headers).status_code == 404


def test_add_reports_clamping(client, make_user, make_product, login):
    apple, _, headers = _setup(make_user, make_product, login)

    response = client.post("/cart/items", headers=headers, json={"product_id": apple, "quantity": 9})

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == Status.QUANTITY_EXCEEDED.value
    assert body["data"]["clamped"] is True
    assert body["data"]["line"]["quantity"] == 5


def test_add_unknown_product(client, make_user, make_product, login):
    _, _, headers = _setup(make_user, make_product, login)

    response = client.post("/cart/items", headers=headers, json={"product_id": 999, "quantity": 1})

    assert response.status_code == 404
    assert response.json()["status"] == Status.PRODUCT_NOT_FOUND.value


def test_add_rejects_zero_quantity(client, make_user, make_product, login):
    apple, _, headers = _setup(make_user, make_product, login)

    response = client.post("/cart/items", headers=headers, json={"product_id": apple, "quantity": 0})

    assert response.status_code == 422


def test_confirm_shows_customer(client, make_user, make_product, login):
    apple, _, headers = _setup(make_user, make_product, login)
    assert client.get("/cart/confirm", headers=headers).status_code == 400

    client.post("/cart/items", headers=headers, json={"product_id": apple, "quantity": 1})
    data = client.get("/cart/confirm", headers=headers).json()["data"]

    assert data["total"] == "1.50"
    assert data["customer"]["email"] == "alice@mail.com"
    assert data["customer"]["address"] == "1 Market Street"


def test_checkout_success(client, make_user, make_product, login, stock_of):
    apple, milk, headers = _setup(make_user, make_product, login)
    client.post("/cart/items", headers=headers, json={"product_id": apple, "quantity": 2})
    client.post("/cart/items", headers=headers, json={"product_id": milk, "quantity": 1})

    response = client.post("/cart/checkout", headers=headers)

    assert response.status_code == 201
    order = response.json()["data"]
    assert order["order_id"].startswith("ord_")
    assert order["total"] == "6.00"
    assert order["customer"]["email"] == "alice@mail.com"
    assert stock_of(apple) == 3
    assert stock_of(milk) == 0
    assert client.get("/cart", headers=headers).json()["data"]["items"] == []


def test_checkout_empty_cart(client, make_user, make_product, login):
    _, _, headers = _setup(make_user, make_product, login)

    response = client.post("/cart/checkout", headers=headers)

    assert response.status_code == 400
    assert response.json()["status"] == Status.EMPTY_CART.value
    assert response.json()["data"]["code"] == "EMPTY_CART"


def test_checkout_insufficient_stock_keeps_cart(client, make_user, make_product, login, stock_of):
    apple, milk, headers = _setup(make_user, make_product, login)
    client.post("/cart/items", headers=headers, json={"product_id": apple, "quantity": 2})
    client.post("/cart/items", headers=headers, json={"product_id": milk, "quantity": 1})

    # Someone else buys the last milk
    make_user(username="bob", email="bob@mail.com")
    other = login("bob@mail.com")
    client.post("/cart/items", headers=other, json={"product_id": milk, "quantity": 1})
    assert client.post("/cart/checkout", headers=other).status_code == 201

    response = client.post("/cart/checkout", headers=headers)

    assert response.status_code == 409
    body = response.json()
    assert body["status"] == Status.QUANTITY_EXCEEDED.value
    assert body["data"]["product_id"] == milk
    assert body["data"]["available"] == 0
    assert stock_of(apple) == 5
    assert len(client.get("/cart", headers=headers).json()["data"]["items"]) == 2


def test_checkout_missing_product(client, make_user, make_product, login, database):
    import asyncio
    from src.data.postgres.product_ops import delete_product

    apple, _, headers = _setup(make_user, make_product, login)
    client.post("/cart/items", headers=headers, json={"product_id": apple, "quantity": 1})
    asyncio.run(delete_product(apple))

    response = client.post("/cart/checkout", headers=headers)

    assert response.status_code == 404
    assert response.json()["status"] == Status.PRODUCT_NOT_FOUND.value


def test_checkout_persistence_failure_maps_to_503(client, make_user, make_product, login, stock_of):
    from unittest.mock import AsyncMock, patch
    from sqlalchemy.exc import OperationalError

    apple, _, headers = _setup(make_user, make_product, login)
    client.post("/cart/items", headers=headers, json={"product_id": apple, "quantity": 1})

    failing = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("deadlock detected")))
    with patch("src.checkout.service._insert_items", failing):
        response = client.post("/cart/checkout", headers=headers)

    assert response.status_code == 503
    assert response.json()["data"]["retryable"] is True
    assert "deadlock detected" not in response.text
    assert "INSERT" not in response.text
    assert stock_of(apple) == 5
    assert len(client.get("/cart", headers=headers).json()["data"]["items"]) == 1
