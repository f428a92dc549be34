# orderhub/repos/cart_repo.py
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from orderhub.data.models.cart import CartModel
from orderhub.utils.logging import get_logger

logger = get_logger(__name__)


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def get_or_create(self, user_id: str) -> CartModel:
        cart = self.get_by_user(user_id)
        if cart:
            return cart

        try:
            cart = CartModel(user_id=user_id, items=[])
            self.db.add(cart)
            self.db.commit()
            self.db.refresh(cart)
            logger.info(f"Created cart {cart.id} for user {user_id}")
            return cart
        except IntegrityError:
            # a concurrent request created it first, use theirs
            self.db.rollback()
            logger.info(f"Cart for user {user_id} created concurrently, re-reading")
            return self.get_by_user(user_id)

    def save(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def rollback(self):
        self.db.rollback()
