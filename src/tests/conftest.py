"""Pytest plugin to execute asyncio marked tests without external dependencies,
plus the storefront fixtures shared by the test modules."""

from __future__ import annotations

import asyncio
import inspect
import os
import tempfile
from decimal import Decimal

import pytest

# Point configuration at a throwaway SQLite file and the in-memory session store
# before anything under src is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'storefront.db')}"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["JWT_SECRET"] = "storefront-test-secret-0123456789abcdef"


@pytest.hookimpl
def pytest_configure(config: pytest.Config) -> None:  # pragma: no cover - pytest hook
    config.addinivalue_line(
        "markers",
        "asyncio: mark test to run inside an event loop",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool:  # pragma: no cover - pytest hook
    if "asyncio" not in pyfuncitem.keywords:
        return False

    test_function = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_function):
        return False

    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(test_function(**pyfuncitem.funcargs))
    finally:
        loop.close()
    return True


@pytest.fixture
def database():
    """Fresh, empty schema for every test."""
    from src.data.postgres.schema import drop_schema, ensure_schema

    asyncio.run(drop_schema())
    asyncio.run(ensure_schema())
    yield


@pytest.fixture
def session_store():
    from src.storefront.services.session_store import get_session_store

    store = get_session_store()
    store.clear()
    yield store
    store.clear()


@pytest.fixture
def make_product(database):
    """Insert a product and return its id."""
    from src.data.postgres.product_ops import create_product

    def _make(name="Apple", quantity=10, price="1.50", discount="0", category="Fruits", **extra):
        product = asyncio.run(create_product({
            "name": name,
            "quantity": quantity,
            "price": Decimal(price),
            "discount": Decimal(discount),
            "category": category,
            **extra,
        }))
        return product.id

    return _make


@pytest.fixture
def stock_of():
    """Current stock of a product, read straight from the database."""
    from src.data.postgres.product_ops import get_product_by_id

    def _stock(product_id):
        product = asyncio.run(get_product_by_id(product_id))
        return product.quantity if product else None

    return _stock


@pytest.fixture
def make_user(database):
    """Insert a user with a bcrypt password and return it."""
    from src.data.models.enum.user_role import UserRole
    from src.data.postgres.user_ops import create_user
    from src.storefront.services.auth_service import hash_password

    def _make(username="alice", email="alice@mail.com", password="secret123", role=UserRole.USER,
              address="1 Market Street", contact="91234567"):
        return asyncio.run(create_user(
            username=username,
            email=email,
            hashed_password=hash_password(password),
            address=address,
            contact=contact,
            role=role,
        ))

    return _make


@pytest.fixture
def client(database, session_store):
    from fastapi.testclient import TestClient
    from src.storefront.app import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(client):
    """Log in through the API and return Authorization headers."""

    def _login(username="alice@mail.com", password="secret123"):
        response = client.post("/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        token = response.json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login
