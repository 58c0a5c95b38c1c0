"""
JWT utility functions for authentication.

Provides functions to create, decode, and verify JWT tokens. Each token is
bound to one shop session through the ``sid`` claim, so logging out (which
deletes the session) invalidates the cart even while the token itself is
still unexpired.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel

from src.config import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRE_MINUTES


class TokenPayload(BaseModel):
    """JWT token payload schema."""
    user_id: int
    username: str
    role: str
    sid: str
    exp: Optional[datetime] = None


def create_access_token(
    user_id: int,
    username: str,
    role: str,
    session_id: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: The user's ID
        username: The user's username
        role: The user's role value ("USER" or "ADMIN")
        session_id: Shop session the token is bound to
        expires_delta: Optional expiration time delta. Defaults to JWT_EXPIRE_MINUTES.

    Returns:
        Encoded JWT token string
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=JWT_EXPIRE_MINUTES)

    payload = {
        "user_id": user_id,
        "username": username,
        "role": role,
        "sid": session_id,
        "exp": expire
    }

    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """
    Decode a JWT token and return its payload.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is invalid
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])


def get_token_payload(token: str) -> Optional[TokenPayload]:
    """
    Get the full token payload as a Pydantic model.

    Returns:
        TokenPayload if valid, None otherwise
    """
    try:
        payload = decode_token(token)
    except (jwt.ExpiredSignatureError, jwt.InvalidTokenError):
        return None

    if payload.get("user_id") is None or not payload.get("sid"):
        return None

    return TokenPayload(
        user_id=payload["user_id"],
        username=payload.get("username") or "",
        role=payload.get("role") or "USER",
        sid=payload["sid"],
        exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc) if payload.get("exp") else None
    )
