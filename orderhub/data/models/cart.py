# orderhub/data/models/cart.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from orderhub.data.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    # one live cart per principal
    user_id = Column(String(255), nullable=False, unique=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

    @property
    def total(self) -> Decimal:
        return sum((i.line_total for i in self.items), Decimal("0.00"))

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, product_id: str):
        return next((i for i in self.items if i.product_id == product_id), None)

    def touch(self):
        self.updated_at = utcnow()
