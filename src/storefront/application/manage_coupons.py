"""Application services: coupon administration and redemption."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from storefront.application.dto import CouponDTO
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.coupon import Coupon, DiscountType, normalize_code
from storefront.domain.model.inventory import new_id
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CouponSpec:
    """Admin-entered coupon terms."""

    code: str
    discount_type: str
    discount_value: Decimal
    valid_from: datetime
    valid_to: datetime | None = None
    description: str | None = None
    min_purchase: Decimal | None = None
    max_discount: Decimal | None = None
    usage_limit: int | None = None
    usage_per_user: int | None = None
    active: bool = True


def _parse_discount_type(value: str) -> DiscountType:
    try:
        return DiscountType(value.upper())
    except ValueError:
        raise ValidationError("Discount type must be PERCENTAGE or FIXED") from None


def _money(value: Decimal | None, currency: str) -> Money | None:
    return Money.of(value, currency) if value is not None else None


class CreateCouponHandler:

    def __init__(self, uow: UnitOfWork, currency: str = "ILS") -> None:
        self._uow = uow
        self._currency = currency

    def handle(self, spec: CouponSpec) -> CouponDTO:
        with self._uow as uow:
            if uow.coupons.get_by_code(normalize_code(spec.code)) is not None:
                raise ValidationError("Coupon code already exists")

            coupon = Coupon.create(
                new_id(),
                spec.code,
                _parse_discount_type(spec.discount_type),
                Decimal(str(spec.discount_value)),
                spec.valid_from,
                valid_to=spec.valid_to,
                description=spec.description,
                min_purchase=_money(spec.min_purchase, self._currency),
                max_discount=_money(spec.max_discount, self._currency),
                usage_limit=spec.usage_limit,
                usage_per_user=spec.usage_per_user,
                active=spec.active,
            )
            uow.coupons.save(coupon)
            uow.commit()

        logger.info("coupon %s created", coupon.code)
        return CouponDTO.from_domain(coupon)


class UpdateCouponHandler:

    def __init__(self, uow: UnitOfWork, currency: str = "ILS") -> None:
        self._uow = uow
        self._currency = currency

    def handle(self, coupon_id: str, spec: CouponSpec) -> CouponDTO:
        """Replace a coupon's terms. ``usage_count`` is preserved."""
        with self._uow as uow:
            coupon = uow.coupons.get_by_id(coupon_id)
            if coupon is None:
                raise EntityNotFoundError("Coupon not found")

            code = normalize_code(spec.code)
            if code != coupon.code and uow.coupons.get_by_code(code) is not None:
                raise ValidationError("Coupon code already exists")

            coupon.code = code
            coupon.discount_type = _parse_discount_type(spec.discount_type)
            coupon.discount_value = Decimal(str(spec.discount_value))
            coupon.valid_from = spec.valid_from
            coupon.valid_to = spec.valid_to
            coupon.description = spec.description
            coupon.min_purchase = _money(spec.min_purchase, self._currency)
            coupon.max_discount = _money(spec.max_discount, self._currency)
            coupon.usage_limit = spec.usage_limit
            coupon.usage_per_user = spec.usage_per_user
            coupon.active = spec.active
            coupon.check_terms()

            uow.coupons.save(coupon)
            uow.commit()

        return CouponDTO.from_domain(coupon)


class DeleteCouponHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, coupon_id: str) -> None:
        with self._uow as uow:
            coupon = uow.coupons.get_by_id(coupon_id)
            if coupon is None:
                raise EntityNotFoundError("Coupon not found")
            if uow.orders.count_with_coupon(coupon.id) > 0:
                raise ValidationError(
                    "Cannot delete coupon that has been used in orders. "
                    "Consider deactivating it instead."
                )
            uow.coupons.delete(coupon.id)
            uow.commit()

        logger.info("coupon %s deleted", coupon.code)


class DeactivateCouponHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, code: str) -> CouponDTO:
        with self._uow as uow:
            coupon = uow.coupons.get_by_code(normalize_code(code))
            if coupon is None:
                raise EntityNotFoundError("Coupon not found")
            coupon.deactivate()
            uow.coupons.save(coupon)
            uow.commit()
        return CouponDTO.from_domain(coupon)


class ListCouponsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[CouponDTO]:
        with self._uow as uow:
            coupons = uow.coupons.list_all()
        return [CouponDTO.from_domain(c) for c in sorted(coupons, key=lambda c: c.code)]


class RedeemCouponHandler:
    """Counts one use of a coupon.

    Does not re-validate; see ``CouponValidator`` for the race this leaves open.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, coupon_id: str) -> CouponDTO:
        with self._uow as uow:
            coupon = uow.coupons.get_by_id(coupon_id)
            if coupon is None:
                raise EntityNotFoundError("Coupon not found")
            coupon.redeem()
            uow.coupons.save(coupon)
            uow.commit()

        logger.info("coupon %s redeemed (usage_count=%d)", coupon.code, coupon.usage_count)
        return CouponDTO.from_domain(coupon)
