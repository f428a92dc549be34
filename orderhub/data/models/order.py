# orderhub/data/models/order.py
import uuid
from decimal import Decimal

from sqlalchemy import Column, String, DateTime, Numeric, JSON, Enum, Index
from sqlalchemy.orm import relationship

from orderhub.data.database import Base
from orderhub.data.models.cart import utcnow
from orderhub.domain.status import OrderStatus


def new_order_id() -> str:
    return uuid.uuid4().hex


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=new_order_id)
    user_id = Column(String(255), nullable=False)

    status = Column(
        Enum(OrderStatus, native_enum=False, length=32),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    # fixed at creation, never recomputed
    total_amount = Column(Numeric(12, 2), nullable=False)
    shipping_address = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )

    __table_args__ = (
        Index("ix_orders_user_created", "user_id", "created_at"),
        Index("ix_orders_user_status_created", "user_id", "status", "created_at"),
        Index("ix_orders_created", "created_at"),
    )

    def belongs_to(self, user_id: str) -> bool:
        return self.user_id == user_id

    def seller_items(self, seller_id: str) -> list:
        return [i for i in self.items if i.seller_id == seller_id]

    def contains_seller_items(self, seller_id: str) -> bool:
        return any(i.seller_id == seller_id for i in self.items)

    def matches_query(self, lower_query: str) -> bool:
        """Order id or any product name contains the (lower-cased) query."""
        return lower_query in self.id.lower() or any(
            lower_query in i.product_name.lower() for i in self.items
        )

    def matches_seller_query(self, seller_id: str, lower_query: str) -> bool:
        """Like matches_query, but only the seller's own product names count."""
        return lower_query in self.id.lower() or any(
            lower_query in i.product_name.lower() for i in self.seller_items(seller_id)
        )

    @staticmethod
    def compute_total(items) -> Decimal:
        return sum((i.line_total for i in items), Decimal("0.00"))

    def touch(self):
        self.updated_at = utcnow()
