"""Domain service: Coupon Validator.

Decides whether a coupon applies to a subtotal and for how much. Reads
only; redemption (``usage_count`` increment) happens when the order is
placed. The two steps are not guarded against each other, so concurrent
checkouts near ``usage_limit`` can push ``usage_count`` past it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.coupon import Coupon, normalize_code
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.coupon_repository import CouponRepository
from storefront.domain.repository.order_repository import OrderRepository


@dataclass(frozen=True)
class CouponQuote:
    coupon: Coupon
    subtotal: Money
    discount: Money

    @property
    def final_total(self) -> Money:
        return self.subtotal - self.discount


class CouponValidator:

    def __init__(self, coupons: CouponRepository, orders: OrderRepository) -> None:
        self._coupons = coupons
        self._orders = orders

    def validate(
        self,
        code: str,
        subtotal: Money,
        now: datetime,
        user_id: str | None = None,
    ) -> CouponQuote:
        """Run the checks in order; the first failing one raises.

        1. code exists          4. not expired
        2. active               5. global usage cap
        3. already valid        6. per-user cap (only with ``user_id``)
                                7. minimum purchase
        """
        if not code or not code.strip():
            raise ValidationError("Coupon code is required")

        coupon = self._coupons.get_by_code(normalize_code(code))
        if coupon is None:
            raise EntityNotFoundError("Invalid coupon code")

        coupon.check_eligibility(now)

        if user_id and coupon.usage_per_user is not None:
            used = self._orders.count_with_coupon(coupon.id, user_id=user_id)
            coupon.check_user_usage(used)

        coupon.check_minimum(subtotal)

        return CouponQuote(coupon=coupon, subtotal=subtotal, discount=coupon.discount_for(subtotal))
