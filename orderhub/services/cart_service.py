# orderhub/services/cart_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from orderhub.data.models.cart import CartModel
from orderhub.data.models.cart_item import CartItemModel
from orderhub.domain.errors import DependencyError, InvalidArgumentError, NotFoundError
from orderhub.domain.schemas import CartOut, ProductInfo
from orderhub.repos.cart_repo import CartRepo
from orderhub.services.product_client import ProductClient
from orderhub.services.stock import require_product, ensure_stock, snapshot_price
from orderhub.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases of the cart domain, always scoped to the caller.
    commands (add, update, remove, clear) change the cart,
    the query (get) only reads, creating an empty cart on first access
    """

    def __init__(self, db: Session, product_client: ProductClient):
        self.repo = CartRepo(db)
        self.product_client = product_client

    #query
    def get_cart(self, user_id: str) -> CartOut:
        cart = self.repo.get_or_create(user_id)
        out = CartOut.model_validate(cart)

        items = [
            item.model_copy(update={"available": self._is_available(item.product_id, item.quantity)})
            for item in out.items
        ]
        return out.model_copy(update={"items": items})

    #commands
    def add_item(self, user_id: str, product_id: str, quantity: int) -> CartOut:
        if quantity < 1:
            raise InvalidArgumentError("Quantity must be at least 1")

        product = require_product(self.product_client, product_id)
        cart = self.repo.get_or_create(user_id)
        self._merge_item(cart, product_id, product, quantity)

        try:
            return self._save(cart)
        except IntegrityError:
            # a concurrent request inserted the same line first, merge into it once
            self.repo.rollback()
            logger.info(f"Product {product_id} added to cart of {user_id} concurrently, merging")
            cart = self.repo.get_by_user(user_id)
            self._merge_item(cart, product_id, product, quantity)
            return self._save(cart)

    def _merge_item(self, cart: CartModel, product_id: str, product: ProductInfo, quantity: int):
        existing = cart.find_item(product_id)
        new_quantity = existing.quantity + quantity if existing else quantity
        ensure_stock(product, new_quantity)
        price = snapshot_price(product)

        if existing:
            logger.info(
                f"Product {product_id} already in cart {cart.id}, raising quantity "
                f"from {existing.quantity} to {new_quantity}"
            )
            existing.quantity = new_quantity
            existing.price = price
        else:
            logger.info(f"Adding product {product_id} x{quantity} to cart {cart.id}")
            cart.items.append(
                CartItemModel(
                    product_id=product_id,
                    product_name=product.name,
                    quantity=quantity,
                    price=price,
                )
            )

    def update_item_quantity(self, user_id: str, product_id: str, quantity: int) -> CartOut:
        if quantity < 1:
            raise InvalidArgumentError("Quantity must be at least 1")

        cart = self._get_existing(user_id)
        item = cart.find_item(product_id)
        if item is None:
            raise NotFoundError(f"Item not found in cart: {product_id}")

        product = require_product(self.product_client, product_id)
        ensure_stock(product, quantity)
        price = snapshot_price(product)

        logger.info(f"Setting quantity of {product_id} in cart {cart.id} to {quantity}")
        item.quantity = quantity
        item.price = price
        return self._save(cart)

    def remove_item(self, user_id: str, product_id: str) -> CartOut:
        cart = self._get_existing(user_id)

        item = cart.find_item(product_id)
        if item is not None:
            logger.info(f"Removing product {product_id} from cart {cart.id}")
            cart.items.remove(item)

        return self._save(cart)

    def clear_cart(self, user_id: str):
        cart = self._get_existing(user_id)
        logger.info(f"Clearing cart {cart.id}")
        cart.items.clear()
        self._save(cart)

    def _get_existing(self, user_id: str) -> CartModel:
        cart = self.repo.get_by_user(user_id)
        if cart is None:
            raise NotFoundError(f"Cart not found for user: {user_id}")
        return cart

    def _save(self, cart: CartModel) -> CartOut:
        cart.touch()
        return CartOut.model_validate(self.repo.save(cart))

    def _is_available(self, product_id: str, quantity: int) -> bool:
        try:
            product = self.product_client.fetch_product(product_id)
        except DependencyError as e:
            logger.warning(f"Availability of {product_id} unknown: {e}")
            return False
        return product is not None and product.stock is not None and product.stock >= quantity
