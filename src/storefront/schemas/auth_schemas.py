"""Authentication schemas."""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Registration form. Length rules are checked by the auth service so all problems are reported at once."""
    username: str
    email: EmailStr
    password: str
    address: str
    contact: str


class LoginRequest(BaseModel):
    """Login request schema."""
    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1, description="User password")


class LoginResponse(BaseModel):
    """Login response schema with JWT token."""
    access_token: str
    token_type: str = "bearer"
    user_id: int
    username: str
    role: str
    expires_in: int = Field(description="Token expiration time in seconds")


class ProfileUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    address: Optional[str] = None
    contact: Optional[str] = None


class UserInfo(BaseModel):
    """User info extracted from token."""
    user_id: int
    username: str
    role: str
    session_id: str
