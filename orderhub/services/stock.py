# orderhub/services/stock.py
from decimal import Decimal

from orderhub.domain.errors import InvalidArgumentError, NotFoundError, insufficient_stock
from orderhub.domain.schemas import ProductInfo

CENT = Decimal("0.01")


def require_product(product_client, product_id: str) -> ProductInfo:
    product = product_client.fetch_product(product_id)
    if product is None:
        raise NotFoundError(f"Product not found with id: {product_id}")
    return product


def ensure_stock(product: ProductInfo, requested: int):
    if product.stock is None or product.stock < requested:
        raise insufficient_stock(product.name, product.stock, requested)


def snapshot_price(product: ProductInfo) -> Decimal:
    price = Decimal(product.price).quantize(CENT)
    if price <= 0:
        raise InvalidArgumentError(f"Product {product.name} has no valid price")
    return price
