#import all models so SQLAlchemy registers them in Base.metadata

from orderhub.data.models.cart import CartModel
from orderhub.data.models.cart_item import CartItemModel
from orderhub.data.models.order import OrderModel
from orderhub.data.models.order_item import OrderItemModel

__all__ = ["CartModel", "CartItemModel", "OrderModel", "OrderItemModel"]
