# orderhub/services/order_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from orderhub.data.models.order import OrderModel
from orderhub.data.models.order_item import OrderItemModel
from orderhub.domain.errors import (
    ConflictError,
    DomainError,
    ForbiddenError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
)
from orderhub.domain.schemas import OrderOut, ProductInfo, ShippingAddress
from orderhub.domain.status import OrderStatus
from orderhub.repos.cart_repo import CartRepo
from orderhub.repos.order_repo import OrderRepo
from orderhub.services.product_client import ProductClient
from orderhub.services.stock import require_product, ensure_stock
from orderhub.services.user_client import UserClient
from orderhub.utils.logging import get_logger

logger = get_logger(__name__)


def to_order_out(order: OrderModel) -> OrderOut:
    return OrderOut.model_validate(order)


def to_seller_order_out(order: OrderModel, seller_id: str) -> OrderOut:
    """
    Seller projection: only the seller's lines, and a total over those lines.
    The buyer's grand total never leaves the service in this view.
    """
    out = to_order_out(order)
    items = [i for i in out.items if i.seller_id == seller_id]
    total = sum((i.line_total for i in items), Decimal("0.00"))
    return out.model_copy(update={"items": items, "total_amount": total})


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _date_range(date_from: datetime | None, date_to: datetime | None):
    """Both bounds or nothing, a lone bound is ignored."""
    if date_from is None or date_to is None:
        return None
    start, end = _utc(date_from), _utc(date_to)
    if start > end:
        raise InvalidArgumentError("dateFrom must not be after dateTo")
    return start, end


def _normalize_query(query: str | None) -> str | None:
    if query is None or not query.strip():
        return None
    #matched as given, surrounding whitespace included
    return query.lower()


class OrderService:
    """
    Order lifecycle: creation from the cart, buyer cancel/delete/redo,
    seller status updates and the seller projections, search.

    Stock lives in the catalog, so nothing here is one transaction.
    The order row is the commit point, stock calls come after it on
    creation and before it on cancellation.
    """

    def __init__(self, db: Session, product_client: ProductClient, user_client: UserClient):
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.product_client = product_client
        self.user_client = user_client

    #buyer commands
    def create_order(self, user_id: str, shipping_address: ShippingAddress) -> OrderOut:
        cart = self.cart_repo.get_by_user(user_id)
        if cart is None:
            raise NotFoundError(f"Cart not found for user: {user_id}")
        if cart.is_empty:
            raise InvalidArgumentError("Cannot create order from empty cart")

        # per-call memo, never shared between requests
        products: Dict[str, ProductInfo] = {}
        seller_ids: Dict[str, str] = {}

        for line in cart.items:
            product = products.get(line.product_id)
            if product is None:
                product = require_product(self.product_client, line.product_id)
                products[line.product_id] = product
            ensure_stock(product, line.quantity)

            if line.product_id not in seller_ids:
                seller_ids[line.product_id] = self._resolve_seller_id(line.product_id, product)

        items = [
            OrderItemModel(
                product_id=line.product_id,
                product_name=line.product_name,
                seller_id=seller_ids[line.product_id],
                quantity=line.quantity,
                price=line.price,
            )
            for line in cart.items
        ]

        order = self.repo.create_order(
            OrderModel(
                user_id=user_id,
                items=items,
                status=OrderStatus.PENDING,
                total_amount=OrderModel.compute_total(items),
                shipping_address=shipping_address.model_dump(),
            )
        )
        logger.info(f"Order {order.id} created for user {user_id}, total {order.total_amount}")

        self._reduce_stock(order)

        try:
            cart.items.clear()
            cart.touch()
            self.cart_repo.save(cart)
        except SQLAlchemyError:
            self.cart_repo.rollback()
            logger.exception(f"Order {order.id} created but cart {cart.id} could not be cleared")

        return to_order_out(order)

    def cancel_order(self, order_id: str, user_id: str) -> OrderOut:
        order = self._get_buyer_order(order_id, user_id)

        if not order.status.is_cancellable:
            raise ConflictError(f"Order cannot be cancelled. Current status: {order.status.value}")

        # restore first: if this fails the order is still cancellable
        for item in order.items:
            self.product_client.restore_stock(item.product_id, item.quantity)

        order.status = OrderStatus.CANCELLED
        order.touch()
        saved = self.repo.save(order)

        logger.info(f"Order {order_id} cancelled by user {user_id}")
        return to_order_out(saved)

    def delete_order(self, order_id: str, user_id: str):
        order = self._get_buyer_order(order_id, user_id)

        if not order.status.is_terminal:
            raise ConflictError(f"Order cannot be deleted. Current status: {order.status.value}")

        self.repo.delete(order)
        logger.info(f"Order {order_id} deleted by user {user_id}")

    def redo_order(self, order_id: str, user_id: str) -> OrderOut:
        original = self._get_buyer_order(order_id, user_id)

        products: Dict[str, ProductInfo] = {}
        for item in original.items:
            if item.product_id not in products:
                products[item.product_id] = require_product(self.product_client, item.product_id)
            ensure_stock(products[item.product_id], item.quantity)

        items = [item.copy() for item in original.items]
        order = self.repo.create_order(
            OrderModel(
                user_id=user_id,
                items=items,
                status=OrderStatus.PENDING,
                total_amount=OrderModel.compute_total(items),
                shipping_address=dict(original.shipping_address),
            )
        )
        logger.info(f"Order {order.id} created by redoing order {order_id}")

        self._reduce_stock(order)
        return to_order_out(order)

    #buyer queries
    def get_orders(self, user_id: str) -> List[OrderOut]:
        return [to_order_out(o) for o in self.repo.find_by_user(user_id)]

    def get_order_by_id(self, order_id: str, user_id: str) -> OrderOut:
        return to_order_out(self._get_buyer_order(order_id, user_id))

    def search_orders(
        self,
        user_id: str,
        query: str | None = None,
        status: OrderStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> List[OrderOut]:
        date_range = _date_range(date_from, date_to)

        if date_range:
            orders = self.repo.find_by_user_between(user_id, *date_range)
            if status is not None:
                orders = [o for o in orders if o.status == status]
        elif status is not None:
            orders = self.repo.find_by_user_and_status(user_id, status)
        else:
            orders = self.repo.find_by_user(user_id)

        lower_query = _normalize_query(query)
        if lower_query:
            orders = [o for o in orders if o.matches_query(lower_query)]

        return [to_order_out(o) for o in orders]

    #seller
    def get_seller_orders(self, seller_email: str) -> List[OrderOut]:
        seller_id = self._resolve_seller_by_email(seller_email)
        return self._project(self.repo.find_by_seller(seller_id), seller_id)

    def get_seller_order_by_id(self, order_id: str, seller_email: str) -> OrderOut:
        seller_id = self._resolve_seller_by_email(seller_email)
        order = self._get_seller_order(order_id, seller_id)
        return to_seller_order_out(order, seller_id)

    def update_order_status(self, order_id: str, new_status: OrderStatus, seller_email: str) -> OrderOut:
        seller_id = self._resolve_seller_by_email(seller_email)
        order = self._get_seller_order(order_id, seller_id)

        current = order.status
        if not current.can_transition_to(new_status):
            raise ConflictError(
                f"Invalid status transition from {current.value} to {new_status.value}"
            )

        order.status = new_status
        order.touch()
        saved = self.repo.save(order)

        logger.info(f"Order {order_id} moved {current.value} -> {new_status.value} by seller {seller_id}")
        return to_seller_order_out(saved, seller_id)

    def search_seller_orders(
        self,
        seller_email: str,
        query: str | None = None,
        status: OrderStatus | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> List[OrderOut]:
        seller_id = self._resolve_seller_by_email(seller_email)
        date_range = _date_range(date_from, date_to)

        if date_range:
            orders = self.repo.find_between(*date_range)
        else:
            orders = self.repo.find_by_seller(seller_id)

        orders = [o for o in orders if o.contains_seller_items(seller_id)]
        if status is not None:
            orders = [o for o in orders if o.status == status]

        lower_query = _normalize_query(query)
        if lower_query:
            orders = [o for o in orders if o.matches_seller_query(seller_id, lower_query)]

        return self._project(orders, seller_id)

    #helpers
    def _get_order(self, order_id: str) -> OrderModel:
        order = self.repo.get_order(order_id)
        if order is None:
            raise NotFoundError(f"Order not found with id: {order_id}")
        return order

    def _get_buyer_order(self, order_id: str, user_id: str) -> OrderModel:
        order = self._get_order(order_id)
        if not order.belongs_to(user_id):
            raise ForbiddenError("Order does not belong to user")
        return order

    def _get_seller_order(self, order_id: str, seller_id: str) -> OrderModel:
        order = self._get_order(order_id)
        if not order.contains_seller_items(seller_id):
            raise ForbiddenError("Order does not contain seller's products")
        return order

    def _resolve_seller_by_email(self, email: str) -> str:
        seller_id = self.user_client.find_user_id_by_email(email)
        if not seller_id:
            raise NotFoundError(f"Seller not found with email: {email}")
        return seller_id

    def _resolve_seller_id(self, product_id: str, product: ProductInfo) -> str:
        seller_id = product.seller_id or self.product_client.fetch_seller_id(product_id)
        if not seller_id:
            raise NotFoundError(f"Seller not found for product: {product.name}")
        return seller_id

    def _reduce_stock(self, order: OrderModel):
        """
        Runs after the commit point. A failure leaves the order PENDING with
        stock not (fully) reduced, which is reported, not rolled back.
        """
        for item in order.items:
            try:
                self.product_client.reduce_stock(item.product_id, item.quantity)
            except DomainError as e:
                logger.exception(
                    f"Order {order.id} persisted but stock reduction failed "
                    f"for product {item.product_id} x{item.quantity}"
                )
                raise InternalError(
                    f"Order {order.id} was created but stock could not be reserved"
                ) from e

    @staticmethod
    def _project(orders: Iterable[OrderModel], seller_id: str) -> List[OrderOut]:
        return [to_seller_order_out(o, seller_id) for o in orders]
