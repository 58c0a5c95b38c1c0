from sqlalchemy import Column, Integer, String, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship
from src.data.models import Base


class OrderItem(Base):
    __tablename__ = "order_item"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id_fk = Column(Integer, ForeignKey("order.id", ondelete="CASCADE"), nullable=False, index=True)
    # No FK to product: name and price are snapshots, so product edits/deletes never touch history
    product_id = Column(Integer, nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(DECIMAL(18, 2), nullable=False)
    image = Column(String(255), nullable=True)

    order = relationship("Order", back_populates="items")

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": f"{self.price:.2f}",
            "image": self.image,
        }
