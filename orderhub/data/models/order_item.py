from decimal import Decimal

from sqlalchemy import Column, Integer, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from orderhub.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    product_id = Column(String(64), nullable=False)
    product_name = Column(String(255), nullable=False)
    seller_id = Column(String(255), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.price) * self.quantity

    def copy(self) -> "OrderItemModel":
        return OrderItemModel(
            product_id=self.product_id,
            product_name=self.product_name,
            seller_id=self.seller_id,
            quantity=self.quantity,
            price=self.price,
        )
