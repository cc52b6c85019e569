"""JSON-backed implementation of CouponRepository."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.model.coupon import Coupon, DiscountType
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.coupon_repository import CouponRepository
from storefront.infrastructure.persistence.json_table import JsonTable, dump_dt, load_dt


class JsonCouponRepository(JsonTable, CouponRepository):

    # --- CouponRepository interface -------------------------------------------

    def get_by_id(self, coupon_id: str) -> Coupon | None:
        raw = self._find_raw("id", coupon_id)
        return self._to_domain(raw) if raw else None

    def get_by_code(self, code: str) -> Coupon | None:
        raw = self._find_raw("code", code)
        return self._to_domain(raw) if raw else None

    def list_all(self) -> list[Coupon]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, coupon: Coupon) -> None:
        self._upsert_raw("id", self._to_raw(coupon))

    def delete(self, coupon_id: str) -> None:
        self._remove_raw("id", coupon_id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(coupon: Coupon) -> dict:
        return {
            "id": coupon.id,
            "code": coupon.code,
            "description": coupon.description,
            "discount_type": coupon.discount_type.value,
            "discount_value": str(coupon.discount_value),
            "min_purchase": str(coupon.min_purchase.amount) if coupon.min_purchase else None,
            "max_discount": str(coupon.max_discount.amount) if coupon.max_discount else None,
            "currency": (coupon.min_purchase or coupon.max_discount or Money.zero()).currency,
            "usage_limit": coupon.usage_limit,
            "usage_per_user": coupon.usage_per_user,
            "usage_count": coupon.usage_count,
            "valid_from": dump_dt(coupon.valid_from),
            "valid_to": dump_dt(coupon.valid_to),
            "active": coupon.active,
            "created_at": dump_dt(coupon.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Coupon:
        currency = raw.get("currency", "ILS")
        min_purchase = raw.get("min_purchase")
        max_discount = raw.get("max_discount")
        return Coupon(
            id=raw["id"],
            code=raw["code"],
            description=raw.get("description"),
            discount_type=DiscountType(raw["discount_type"]),
            discount_value=Decimal(raw["discount_value"]),
            min_purchase=Money(Decimal(min_purchase), currency) if min_purchase is not None else None,
            max_discount=Money(Decimal(max_discount), currency) if max_discount is not None else None,
            usage_limit=raw.get("usage_limit"),
            usage_per_user=raw.get("usage_per_user"),
            usage_count=raw.get("usage_count", 0),
            valid_from=load_dt(raw["valid_from"]),
            valid_to=load_dt(raw.get("valid_to")),
            active=raw.get("active", True),
            created_at=load_dt(raw["created_at"]),
        )
