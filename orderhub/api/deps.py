# orderhub/api/deps.py
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from orderhub.data.database import get_db
from orderhub.domain.errors import UnauthenticatedError
from orderhub.services.cart_service import CartService
from orderhub.services.order_service import OrderService
from orderhub.services.product_client import ProductClient
from orderhub.services.user_client import UserClient
from orderhub.utils.settings import USER_HEADER


def get_caller_id(x_user_email: str | None = Header(default=None, alias=USER_HEADER)) -> str:
    """Principal attached by the gateway, treated as an opaque id."""
    if x_user_email is None or not x_user_email.strip():
        raise UnauthenticatedError(f"Missing {USER_HEADER} header")
    return x_user_email.strip()


def get_product_client(request: Request) -> ProductClient:
    return request.app.state.product_client


def get_user_client(request: Request) -> UserClient:
    return request.app.state.user_client


def get_cart_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
) -> CartService:
    return CartService(db=db, product_client=product_client)


def get_order_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
    user_client: UserClient = Depends(get_user_client),
) -> OrderService:
    return OrderService(db=db, product_client=product_client, user_client=user_client)
