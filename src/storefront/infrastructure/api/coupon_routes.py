"""Coupon routes: public validation and redemption, admin management."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from storefront.application.manage_coupons import (
    CouponSpec,
    CreateCouponHandler,
    DeleteCouponHandler,
    ListCouponsHandler,
    RedeemCouponHandler,
    UpdateCouponHandler,
)
from storefront.application.validate_coupon import ValidateCouponHandler
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.api.dependencies import (
    Session,
    current_session,
    get_settings,
    get_uow,
    require_admin,
)
from storefront.infrastructure.api.schemas import CouponRequest, UseCouponRequest, ValidateCouponRequest
from storefront.infrastructure.api.serialization import to_json
from storefront.infrastructure.settings import Settings

router = APIRouter(prefix="/coupons", tags=["coupons"])


def _spec(body: CouponRequest) -> CouponSpec:
    return CouponSpec(**body.model_dump())


@router.post("/validate")
def validate_coupon(
    body: ValidateCouponRequest,
    uow: UnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_settings),
    session: Session | None = Depends(current_session),
) -> dict:
    user_id = body.user_id or (session.user_id if session and not session.is_admin else None)
    handler = ValidateCouponHandler(uow, currency=settings.currency)
    return to_json(handler.handle(body.code, body.subtotal, user_id=user_id))


@router.post("/use")
def use_coupon(body: UseCouponRequest, uow: UnitOfWork = Depends(get_uow)) -> dict:
    coupon = RedeemCouponHandler(uow).handle(body.coupon_id)
    return {"success": True, "coupon": {"code": coupon.code, "usageCount": coupon.usage_count}}


@router.get("", dependencies=[Depends(require_admin)])
def list_coupons(uow: UnitOfWork = Depends(get_uow)) -> dict:
    return {"coupons": to_json(ListCouponsHandler(uow).handle())}


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_coupon(
    body: CouponRequest,
    uow: UnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_settings),
) -> dict:
    coupon = CreateCouponHandler(uow, currency=settings.currency).handle(_spec(body))
    return {"coupon": to_json(coupon)}


@router.put("/{coupon_id}", dependencies=[Depends(require_admin)])
def update_coupon(
    coupon_id: str,
    body: CouponRequest,
    uow: UnitOfWork = Depends(get_uow),
    settings: Settings = Depends(get_settings),
) -> dict:
    coupon = UpdateCouponHandler(uow, currency=settings.currency).handle(coupon_id, _spec(body))
    return {"coupon": to_json(coupon)}


@router.delete("/{coupon_id}", dependencies=[Depends(require_admin)])
def delete_coupon(coupon_id: str, uow: UnitOfWork = Depends(get_uow)) -> dict:
    DeleteCouponHandler(uow).handle(coupon_id)
    return {"success": True}
