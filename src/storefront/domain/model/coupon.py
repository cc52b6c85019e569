"""Coupon aggregate.

Codes are stored upper-case. A coupon that an order references is never
deleted, only deactivated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money

CODE_PATTERN = re.compile(r"^[A-Z0-9_-]{3,20}$")


class DiscountType(Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass
class Coupon:
    id: str
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    valid_from: datetime
    valid_to: datetime | None = None
    description: str | None = None
    min_purchase: Money | None = None
    max_discount: Money | None = None
    usage_limit: int | None = None
    usage_per_user: int | None = None
    active: bool = True
    usage_count: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory / edits ------------------------------------------------------

    @staticmethod
    def create(id: str, code: str, discount_type: DiscountType, discount_value: Decimal,
               valid_from: datetime, **terms) -> Coupon:
        coupon = Coupon(
            id=id,
            code=normalize_code(code),
            discount_type=discount_type,
            discount_value=discount_value,
            valid_from=valid_from,
            **terms,
        )
        coupon.check_terms()
        return coupon

    def check_terms(self) -> None:
        """Validate admin-entered terms."""
        if not CODE_PATTERN.match(self.code):
            raise ValidationError(
                "Coupon code must be 3-20 characters of A-Z, 0-9, '_' or '-'"
            )
        if self.discount_value <= 0:
            raise ValidationError("Discount value must be positive")
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValidationError("Percentage discount cannot exceed 100%")
        if self.valid_to is not None and self.valid_from > self.valid_to:
            raise ValidationError("End date must be after start date")
        for name in ("usage_limit", "usage_per_user"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ValidationError(f"{name} must be at least 1")

    def deactivate(self) -> None:
        self.active = False

    def redeem(self) -> None:
        """Count one use. Does not re-check the usage limit."""
        self.usage_count += 1

    # --- Eligibility ----------------------------------------------------------

    def check_eligibility(self, now: datetime) -> None:
        """Active flag, validity window and global usage cap, in that order."""
        if not self.active:
            raise ValidationError("This coupon is no longer active")
        if now < self.valid_from:
            raise ValidationError("This coupon is not yet valid")
        if self.valid_to is not None and now > self.valid_to:
            raise ValidationError("This coupon has expired")
        if self.usage_limit is not None and self.usage_count >= self.usage_limit:
            raise ValidationError("This coupon has reached its usage limit")

    def check_user_usage(self, times_used: int) -> None:
        if self.usage_per_user is not None and times_used >= self.usage_per_user:
            raise ValidationError("You have already used this coupon")

    def check_minimum(self, subtotal: Money) -> None:
        if self.min_purchase is not None and subtotal < self.min_purchase:
            raise ValidationError(f"Minimum purchase of {self.min_purchase} required")

    # --- Discount -------------------------------------------------------------

    def discount_for(self, subtotal: Money) -> Money:
        """Discount amount; never more than ``subtotal``."""
        if self.discount_type == DiscountType.PERCENTAGE:
            discount = subtotal.percent(self.discount_value)
            if self.max_discount is not None:
                discount = discount.capped_at(self.max_discount)
        else:
            discount = Money(self.discount_value, subtotal.currency)
        return discount.capped_at(subtotal)
