"""Order routes: checkout, lookup and the admin status change."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from storefront.application.dto import OrderItemSpec
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.update_order_status import ShowOrderHandler, UpdateOrderStatusHandler
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import CustomerInfo
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.api.dependencies import (
    Session,
    current_session,
    get_settings,
    get_uow,
    require_admin,
)
from storefront.infrastructure.api.schemas import PlaceOrderRequest, UpdateOrderStatusRequest
from storefront.infrastructure.api.serialization import to_json
from storefront.infrastructure.settings import Settings

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=status.HTTP_201_CREATED)
def place_order(
    body: PlaceOrderRequest,
    uow: UnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_settings),
    session: Session | None = Depends(current_session),
) -> dict:
    customer = CustomerInfo(**body.customer.model_dump())
    items = [
        OrderItemSpec(product_id=i.product_id, quantity=i.quantity, variant_id=i.variant_id)
        for i in body.items
    ]
    user_id = session.user_id if session and not session.is_admin else None
    order = PlaceOrderHandler(uow, admin_email=settings.admin_email).handle(
        customer, items, user_id=user_id, coupon_code=body.coupon_code,
    )
    return {"order": to_json(order)}


@router.get("/{order_id}")
def show_order(
    order_id: int,
    uow: UnitOfWork = Depends(get_uow),
    session: Session | None = Depends(current_session),
) -> dict:
    order = ShowOrderHandler(uow).handle(order_id)
    # Customers only see their own orders; admins see all
    if session is None or (not session.is_admin and order.user_id != session.user_id):
        raise EntityNotFoundError("Order not found")
    return {"order": to_json(order)}


@router.patch("/{order_id}", dependencies=[Depends(require_admin)])
def update_order_status(
    order_id: int,
    body: UpdateOrderStatusRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> dict:
    order = UpdateOrderStatusHandler(uow).handle(order_id, body.status)
    return {"order": to_json(order)}
