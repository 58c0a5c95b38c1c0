from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import Column, String, DECIMAL, Integer, DateTime, Text, CheckConstraint
from sqlalchemy.sql import func

from src.data.models import Base

CENT = Decimal("0.01")


class Product(Base):
    __tablename__ = 'product'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    price = Column(DECIMAL(18, 2), nullable=False)
    discount = Column(DECIMAL(5, 2), nullable=False, default=Decimal("0"))  # percent, 0..100
    category = Column(String(100), nullable=True, index=True)
    description = Column(Text, nullable=True)
    image = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_product_quantity_non_negative"),
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        CheckConstraint("discount >= 0 AND discount <= 100", name="ck_product_discount_range"),
    )

    @property
    def effective_price(self) -> Decimal:
        """Unit price after the product-level discount, rounded to cents."""
        price = Decimal(self.price or 0)
        discount = Decimal(self.discount or 0)
        return (price * (Decimal(100) - discount) / Decimal(100)).quantize(CENT, rounding=ROUND_HALF_UP)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "price": str(self.price),
            "discount": str(self.discount if self.discount is not None else Decimal("0")),
            "effective_price": str(self.effective_price),
            "category": self.category,
            "description": self.description,
            "image": self.image,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }
