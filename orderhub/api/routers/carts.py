# orderhub/api/routers/carts.py
from fastapi import APIRouter, Depends, Query, Response

from orderhub.api.deps import get_caller_id, get_cart_service
from orderhub.domain.schemas import CartOut, ItemIn
from orderhub.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    user_id: str = Depends(get_caller_id),
    svc: CartService = Depends(get_cart_service),
):
    """Caller's cart with per-item availability, created on first access."""
    return svc.get_cart(user_id)


@router.post("/items", response_model=CartOut, status_code=201)
def add_item(
    payload: ItemIn,
    user_id: str = Depends(get_caller_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.add_item(user_id, payload.product_id, payload.quantity)


@router.put("/items/{product_id}", response_model=CartOut)
def update_item_quantity(
    product_id: str,
    quantity: int = Query(...),
    user_id: str = Depends(get_caller_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.update_item_quantity(user_id, product_id, quantity)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: str,
    user_id: str = Depends(get_caller_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove_item(user_id, product_id)


@router.delete("", status_code=204, response_class=Response)
def clear_cart(
    user_id: str = Depends(get_caller_id),
    svc: CartService = Depends(get_cart_service),
):
    svc.clear_cart(user_id)
    return Response(status_code=204)
