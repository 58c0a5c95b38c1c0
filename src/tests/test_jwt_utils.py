from datetime import timedelta

import jwt

from src.config import JWT_ALGORITHM, JWT_SECRET
from src.utils.jwt_utils import create_access_token, get_token_payload


def test_token_carries_user_and_session():
    token = create_access_token(user_id=5, username="bob", role="ADMIN", session_id="sid-9")

    payload = get_token_payload(token)

    assert payload.user_id == 5
    assert payload.username == "bob"
    assert payload.role == "ADMIN"
    assert payload.sid == "sid-9"
    assert payload.exp is not None


def test_expired_token_is_rejected():
    token = create_access_token(5, "bob", "USER", "sid-9", expires_delta=timedelta(seconds=-5))
    assert get_token_payload(token) is None


def test_tampered_or_sessionless_token_is_rejected():
    assert get_token_payload("not-a-token") is None
    forged = jwt.encode({"user_id": 5, "username": "bob"}, JWT_SECRET, algorithm=JWT_ALGORITHM)
    assert get_token_payload(forged) is None
    other_key = jwt.encode({"user_id": 5, "sid": "x"}, "another-secret-key-for-tests-0123456789", algorithm=JWT_ALGORITHM)
    assert get_token_payload(other_key) is None
