# orderhub/domain/schemas.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, List

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    StringConstraints,
)
from pydantic.alias_generators import to_camel

from orderhub.domain.status import OrderStatus


def _as_utc(value: datetime) -> datetime:
    #sqlite hands back naive values, everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]
NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _id_as_str(value):
    #upstream ids are opaque, some services send them as numbers
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


UpstreamId = Annotated[str, BeforeValidator(_id_as_str)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ItemIn(CamelModel):
    """Body of POST /cart/items."""

    product_id: NonBlank = Field(..., description="Catalog product id")
    quantity: int = Field(..., gt=0, description="Quantity to add (must be > 0)")


class ShippingAddress(CamelModel):
    """Shipping address, every field is required and non-blank."""

    full_name: NonBlank
    address: NonBlank
    city: NonBlank
    phone: NonBlank


class CartItemOut(CamelModel):
    product_id: str
    product_name: str
    quantity: int
    price: Money
    line_total: Money
    # None when availability was not checked for this response
    available: bool | None = None


class CartOut(CamelModel):
    id: int
    user_id: str
    items: List[CartItemOut]
    total: Money
    created_at: UtcDatetime
    updated_at: UtcDatetime


class OrderItemOut(CamelModel):
    product_id: str
    product_name: str
    seller_id: str
    quantity: int
    price: Money
    line_total: Money


class OrderOut(CamelModel):
    id: str
    user_id: str
    items: List[OrderItemOut]
    status: OrderStatus
    total_amount: Money
    shipping_address: ShippingAddress
    created_at: UtcDatetime
    updated_at: UtcDatetime


class ProductInfo(CamelModel):
    """Product as returned by the catalog (GET /products/{id})."""

    id: str | int | None = None
    name: str
    price: Decimal
    stock: int | None = None
    seller_id: UpstreamId | None = None


class UserInfo(CamelModel):
    """User as returned by the directory (GET /users/email/{email})."""

    id: UpstreamId
    email: str | None = None
    role: str | None = None
