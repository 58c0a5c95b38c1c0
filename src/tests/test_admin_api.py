import pytest

from src.data.models.enum.user_role import UserRole
from src.utils.status import Status


@pytest.fixture
def admin_headers(make_user, login):
    make_user(username="root", email="root@mail.com", role=UserRole.ADMIN)
    return login("root@mail.com")


def test_admin_routes_reject_regular_users(client, make_user, login):
    make_user()
    headers = login()

    response = client.get("/admin/products", headers=headers)

    assert response.status_code == 403
    assert response.json()["status"] == Status.FORBIDDEN.value
    assert client.get("/admin/users").status_code == 401


def test_product_crud(client, admin_headers):
    created = client.post("/admin/products", headers=admin_headers, json={
        "name": "Mango",
        "quantity": 12,
        "price": "2.40",
        "discount": "25",
        "category": " Fruits ",
        "image": "mango.png",
    })
    assert created.status_code == 201
    product = created.json()["data"]
    assert product["category"] == "Fruits"
    assert product["effective_price"] == "1.80"

    updated = client.put(f"/admin/products/{product['id']}", headers=admin_headers, json={"quantity": 3})
    assert updated.status_code == 200
    assert updated.json()["data"]["quantity"] == 3
    assert updated.json()["data"]["name"] == "Mango"

    listing = client.get("/admin/products", headers=admin_headers, params={"category": "fruit"}).json()["data"]
    assert [p["name"] for p in listing["products"]] == ["Mango"]

    assert client.delete(f"/admin/products/{product['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/products/{product['id']}").status_code == 404
    assert client.put(f"/admin/products/{product['id']}", headers=admin_headers, json={"quantity": 1}).status_code == 404


def test_product_validation(client, admin_headers):
    negative = client.post("/admin/products", headers=admin_headers, json={
        "name": "Bad", "quantity": -1, "price": "1.00",
    })
    assert negative.status_code == 422
    assert negative.json()["status"] == Status.INVALID_PARAMS.value

    created = client.post("/admin/products", headers=admin_headers, json={
        "name": "Pear", "quantity": 1, "price": "1.00",
    }).json()["data"]
    empty = client.put(f"/admin/products/{created['id']}", headers=admin_headers, json={})
    assert empty.status_code == 400


def test_user_management(client, admin_headers, make_user, login):
    alice = make_user()
    make_user(username="bob", email="bob@mail.com")

    users = client.get("/admin/users", headers=admin_headers).json()["data"]
    assert {u["email"] for u in users} == {"root@mail.com", "alice@mail.com", "bob@mail.com"}

    promoted = client.put(f"/admin/users/{alice.id}", headers=admin_headers, json={"role": "ADMIN"})
    assert promoted.status_code == 200
    assert promoted.json()["data"]["role"] == "ADMIN"
    assert client.get("/admin/users", headers=login()).status_code == 200

    conflict = client.put(f"/admin/users/{alice.id}", headers=admin_headers, json={"email": "bob@mail.com"})
    assert conflict.status_code == 409
    assert conflict.json()["status"] == Status.CONFLICT.value

    assert client.put("/admin/users/9999", headers=admin_headers, json={"contact": "12345678"}).status_code == 404


def test_admin_cannot_delete_self(client, admin_headers, make_user):
    me = client.get("/auth/me", headers=admin_headers).json()["data"]
    bob = make_user(username="bob", email="bob@mail.com")

    own = client.delete(f"/admin/users/{me['id']}", headers=admin_headers)
    assert own.status_code == 403
    assert own.json()["status"] == Status.FORBIDDEN.value

    assert client.delete(f"/admin/users/{bob.id}", headers=admin_headers).status_code == 200
    assert client.delete(f"/admin/users/{bob.id}", headers=admin_headers).status_code == 404


def test_order_listing_and_cascade_delete(client, admin_headers, make_user, make_product, login):
    make_user()
    apple = make_product("Apple", quantity=10, price="1.50")
    headers = login()
    client.post("/cart/items", headers=headers, json={"product_id": apple, "quantity": 2})
    order_id = client.post("/cart/checkout", headers=headers).json()["data"]["order_id"]

    orders = client.get("/admin/orders", headers=admin_headers).json()["data"]
    assert [o["order_id"] for o in orders] == [order_id]
    assert orders[0]["customer"]["email"] == "alice@mail.com"

    assert client.delete(f"/admin/orders/{order_id}", headers=admin_headers).status_code == 200
    assert client.get("/admin/orders", headers=admin_headers).json()["data"] == []
    assert client.get(f"/orders/{order_id}", headers=headers).status_code == 404
    assert client.delete(f"/admin/orders/{order_id}", headers=admin_headers).status_code == 404


def test_public_catalog(client, make_product):
    make_product("Apple", price="1.20")
    make_product("Cola", price="2.50", category="Drinks")

    response = client.get("/products", params={"category": "drink", "min_price": "5", "max_price": "1"})

    data = response.json()["data"]
    assert [p["name"] for p in data["products"]] == ["Cola"]
    assert data["filters"] == {"category": "drink", "min_price": "1", "max_price": "5"}
    assert "Fruits" in client.get("/products/categories").json()["data"]
