"""Application service: Validate Coupon use case (query)."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

from storefront.application.dto import CouponDTO, CouponValidationDTO
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.coupon_validator import CouponValidator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ValidateCouponHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        currency: str = "ILS",
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow = uow
        self._currency = currency
        self._clock = clock

    def handle(
        self,
        code: str,
        subtotal: float | Decimal | str,
        user_id: str | None = None,
    ) -> CouponValidationDTO:
        """Return the discount a coupon gives on ``subtotal``. Writes nothing."""
        if not code or not code.strip():
            raise ValidationError("Coupon code is required")
        amount = Money.of(subtotal, self._currency) if _non_negative(subtotal) else None
        if amount is None:
            raise ValidationError("Subtotal must be a non-negative number")

        with self._uow as uow:
            quote = CouponValidator(uow.coupons, uow.orders).validate(
                code, amount, self._clock(), user_id=user_id,
            )

        return CouponValidationDTO(
            valid=True,
            coupon=CouponDTO.from_domain(quote.coupon),
            discount=quote.discount.to_float(),
            final_total=quote.final_total.to_float(),
        )


def _non_negative(value) -> bool:
    try:
        return Decimal(str(value)) >= 0
    except ArithmeticError:
        return False
