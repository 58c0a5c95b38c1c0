from sqlalchemy import Column, Integer, String, DateTime, func, DECIMAL, Text
from sqlalchemy.orm import relationship
from src.data.models import Base


class Order(Base):
    """Order header. order_id is the public identifier shown to customers."""
    __tablename__ = "order"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(64), unique=True, nullable=False, index=True)
    user_email = Column(String(255), nullable=True, index=True)
    user_name = Column(String(150), nullable=True)
    address = Column(Text, nullable=True)
    contact = Column(String(100), nullable=True)
    total = Column(DECIMAL(18, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id",
    )

    def to_dict(self):
        return {
            "order_id": self.order_id,
            "customer": {
                "email": self.user_email,
                "name": self.user_name,
                "address": self.address,
                "contact": self.contact,
            },
            "total": f"{self.total:.2f}" if self.total is not None else "0.00",
            "items": [item.to_dict() for item in self.items] if self.items else [],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
