# orderhub/api/routers/orders.py
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query, Response

from orderhub.api.deps import get_caller_id, get_order_service
from orderhub.domain.schemas import OrderOut, ShippingAddress
from orderhub.domain.status import OrderStatus
from orderhub.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])

# static paths (/search, /seller...) are declared before /{order_id}


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: ShippingAddress,
    user_id: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    """
    Turns the caller's cart into a PENDING order, reserves stock
    in the catalog and empties the cart.
    """
    return svc.create_order(user_id, payload)


@router.get("", response_model=List[OrderOut])
def get_orders(
    user_id: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_orders(user_id)


@router.get("/search", response_model=List[OrderOut])
def search_orders(
    q: str | None = Query(None),
    status: OrderStatus | None = Query(None),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    user_id: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    return svc.search_orders(user_id, q, status, date_from, date_to)


@router.get("/seller", response_model=List[OrderOut])
def get_seller_orders(
    seller_email: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    """Orders with at least one of the caller's products, seller lines only."""
    return svc.get_seller_orders(seller_email)


@router.get("/seller/search", response_model=List[OrderOut])
def search_seller_orders(
    q: str | None = Query(None),
    status: OrderStatus | None = Query(None),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    seller_email: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    return svc.search_seller_orders(seller_email, q, status, date_from, date_to)


@router.get("/seller/{order_id}", response_model=OrderOut)
def get_seller_order_by_id(
    order_id: str,
    seller_email: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_seller_order_by_id(order_id, seller_email)


@router.get("/{order_id}", response_model=OrderOut)
def get_order_by_id(
    order_id: str,
    user_id: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_order_by_id(order_id, user_id)


@router.put("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: str,
    user_id: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    """Buyer cancellation, restores stock for every line."""
    return svc.cancel_order(order_id, user_id)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: str,
    status: OrderStatus = Query(...),
    seller_email: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    return svc.update_order_status(order_id, status, seller_email)


@router.post("/{order_id}/redo", response_model=OrderOut, status_code=201)
def redo_order(
    order_id: str,
    user_id: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    return svc.redo_order(order_id, user_id)


@router.delete("/{order_id}", status_code=204, response_class=Response)
def delete_order(
    order_id: str,
    user_id: str = Depends(get_caller_id),
    svc: OrderService = Depends(get_order_service),
):
    svc.delete_order(order_id, user_id)
    return Response(status_code=204)
