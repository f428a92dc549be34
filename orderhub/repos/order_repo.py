# orderhub/repos/order_repo.py
from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from orderhub.data.models.order import OrderModel
from orderhub.data.models.order_item import OrderItemModel
from orderhub.domain.status import OrderStatus


class OrderRepo:
    """
    Persistence for orders. Every list query returns newest first.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def save(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def delete(self, order: OrderModel):
        self.db.delete(order)
        self.db.commit()

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def _list(self, *criteria) -> List[OrderModel]:
        stmt = select(OrderModel).where(*criteria).order_by(OrderModel.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def find_by_user(self, user_id: str) -> List[OrderModel]:
        return self._list(OrderModel.user_id == user_id)

    def find_by_user_and_status(self, user_id: str, status: OrderStatus) -> List[OrderModel]:
        return self._list(OrderModel.user_id == user_id, OrderModel.status == status)

    def find_by_user_between(self, user_id: str, start: datetime, end: datetime) -> List[OrderModel]:
        return self._list(
            OrderModel.user_id == user_id,
            OrderModel.created_at.between(start, end),
        )

    def find_by_seller(self, seller_id: str) -> List[OrderModel]:
        return self._list(OrderModel.items.any(OrderItemModel.seller_id == seller_id))

    def find_between(self, start: datetime, end: datetime) -> List[OrderModel]:
        return self._list(OrderModel.created_at.between(start, end))

    def rollback(self):
        self.db.rollback()
