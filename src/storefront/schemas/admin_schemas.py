from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Product name")
    quantity: int = Field(..., ge=0, description="Stock quantity")
    price: Decimal = Field(..., ge=0, decimal_places=2, description="List price")
    discount: Decimal = Field(default=Decimal("0"), ge=0, le=100, description="Discount percent")
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = Field(default=None, description="Image filename")


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[int] = Field(default=None, ge=0)
    price: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    discount: Optional[Decimal] = Field(default=None, ge=0, le=100)
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


class UserUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    contact: Optional[str] = None
    role: Optional[Literal["USER", "ADMIN"]] = None
