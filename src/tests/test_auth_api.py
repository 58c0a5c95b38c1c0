import asyncio
import hashlib

from src.data.postgres.user_ops import get_user_by_email
from src.utils.status import Status

REGISTRATION = {
    "username": "carol",
    "email": "Carol@Mail.com",
    "password": "hunter22",
    "address": "5 Orchard Road",
    "contact": "98765432",
}


def test_register_creates_user_account(client):
    response = client.post("/auth/register", json={**REGISTRATION, "role": "ADMIN"})

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == Status.SUCCESS.value
    assert body["data"]["email"] == "carol@mail.com"
    assert body["data"]["role"] == "USER"
    assert "hashed_password" not in body["data"]


def test_register_validation_errors(client):
    response = client.post("/auth/register", json={**REGISTRATION, "password": "abc", "contact": "123"})

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == Status.INVALID_PARAMS.value
    assert "Password" in body["message"]
    assert "Contact" in body["message"]


def test_register_rejects_malformed_email(client):
    response = client.post("/auth/register", json={**REGISTRATION, "email": "not-an-email"})

    assert response.status_code == 422
    assert response.json()["status"] == Status.INVALID_PARAMS.value


def test_register_duplicate_email_conflicts(client):
    assert client.post("/auth/register", json=REGISTRATION).status_code == 201

    response = client.post("/auth/register", json={**REGISTRATION, "email": "carol@mail.com"})

    assert response.status_code == 409
    assert response.json()["status"] == Status.CONFLICT.value


def test_login_with_email_or_username(client, make_user, login):
    make_user()

    by_email = client.post("/auth/login", json={"username": "ALICE@mail.com", "password": "secret123"})
    by_name = client.post("/auth/login", json={"username": "alice", "password": "secret123"})

    assert by_email.status_code == 200
    assert by_name.status_code == 200
    data = by_email.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["role"] == "USER"
    assert data["access_token"] != by_name.json()["data"]["access_token"]


def test_login_rejects_bad_credentials(client, make_user):
    make_user()

    response = client.post("/auth/login", json={"username": "alice", "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.json()["status"] == Status.UNAUTHORIZED.value


def test_me_requires_token(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["status"] == Status.UNAUTHORIZED.value


def test_logout_invalidates_session(client, make_user, login):
    make_user()
    headers = login()
    assert client.get("/auth/me", headers=headers).json()["data"]["username"] == "alice"

    assert client.post("/auth/logout", headers=headers).status_code == 200

    assert client.get("/auth/me", headers=headers).status_code == 401
    assert client.get("/cart", headers=headers).status_code == 401


def test_legacy_sha1_password_is_upgraded_on_login(client, make_user, database):
    from src.data.postgres.user_ops import update_user

    user = make_user()
    legacy = hashlib.sha1(b"secret123").hexdigest()
    asyncio.run(update_user(user.id, {"hashed_password": legacy}))

    response = client.post("/auth/login", json={"username": "alice@mail.com", "password": "secret123"})

    assert response.status_code == 200
    upgraded = asyncio.run(get_user_by_email("alice@mail.com")).hashed_password
    assert upgraded != legacy
    assert upgraded.startswith("$2")


def test_profile_update(client, make_user, login):
    make_user()
    make_user(username="bob", email="bob@mail.com")
    headers = login()

    ok = client.put("/auth/profile", headers=headers, json={"address": "9 New Street", "password": "newpass1"})
    assert ok.status_code == 200
    assert ok.json()["data"]["address"] == "9 New Street"
    assert client.post("/auth/login", json={"username": "alice", "password": "newpass1"}).status_code == 200

    short = client.put("/auth/profile", headers=headers, json={"contact": "12"})
    assert short.status_code == 400

    taken = client.put("/auth/profile", headers=headers, json={"email": "bob@mail.com"})
    assert taken.status_code == 409
    assert taken.json()["status"] == Status.CONFLICT.value
