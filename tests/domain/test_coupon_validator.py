"""Unit tests for the CouponValidator domain service."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.coupon import Coupon, DiscountType
from storefront.domain.model.order import CustomerInfo, Order, OrderLineItem
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.service.coupon_validator import CouponValidator
from tests.fakes import FakeUnitOfWork

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _coupon(**terms) -> Coupon:
    defaults = dict(
        id="c1",
        code="SPRING20",
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("20"),
        valid_from=NOW - timedelta(days=1),
    )
    defaults.update(terms)
    return Coupon(**defaults)


def _order_with_coupon(order_id: int, user_id: str) -> Order:
    return Order(
        id=order_id,
        customer=CustomerInfo("Dana", "Levi", "dana@example.com"),
        items=[OrderLineItem("p1", "Ring", Quantity(1), Money.of("100"))],
        user_id=user_id,
        coupon_id="c1",
    )


def _validate(uow: FakeUnitOfWork, code: str, subtotal: str, user_id: str | None = None):
    with uow:
        return CouponValidator(uow.coupons, uow.orders).validate(
            code, Money.of(subtotal), NOW, user_id=user_id,
        )


class TestValidate:

    def test_percentage_with_cap(self):
        uow = FakeUnitOfWork(coupons=[_coupon(max_discount=Money.of("150"))])
        quote = _validate(uow, "SPRING20", "1000")
        assert quote.discount == Money.of("150")
        assert quote.final_total == Money.of("850")

    def test_fixed_capped_at_subtotal(self):
        uow = FakeUnitOfWork(coupons=[
            _coupon(discount_type=DiscountType.FIXED, discount_value=Decimal("100")),
        ])
        quote = _validate(uow, "SPRING20", "50")
        assert quote.discount == Money.of("50")
        assert quote.final_total == Money.zero()

    def test_lookup_is_case_insensitive(self):
        uow = FakeUnitOfWork(coupons=[_coupon()])
        assert _validate(uow, "spring20", "100").discount == Money.of("20")

    def test_unknown_code(self):
        uow = FakeUnitOfWork(coupons=[_coupon()])
        with pytest.raises(EntityNotFoundError, match="Invalid coupon code"):
            _validate(uow, "NOPE", "100")

    def test_blank_code(self):
        with pytest.raises(ValidationError, match="Coupon code is required"):
            _validate(FakeUnitOfWork(), "  ", "100")

    def test_per_user_limit_counts_orders(self):
        uow = FakeUnitOfWork(
            coupons=[_coupon(usage_per_user=1)],
            orders=[_order_with_coupon(1, "u1")],
        )
        with pytest.raises(ValidationError, match="already used this coupon"):
            _validate(uow, "SPRING20", "100", user_id="u1")
        # another user is unaffected
        assert _validate(uow, "SPRING20", "100", user_id="u2").discount == Money.of("20")

    def test_per_user_limit_skipped_for_guests(self):
        uow = FakeUnitOfWork(
            coupons=[_coupon(usage_per_user=1)],
            orders=[_order_with_coupon(1, "u1")],
        )
        assert _validate(uow, "SPRING20", "100").discount == Money.of("20")

    def test_usage_limit_checked_before_minimum(self):
        uow = FakeUnitOfWork(coupons=[
            _coupon(usage_limit=1, usage_count=1, min_purchase=Money.of("500")),
        ])
        with pytest.raises(ValidationError, match="reached its usage limit"):
            _validate(uow, "SPRING20", "100")

    def test_minimum_purchase(self):
        uow = FakeUnitOfWork(coupons=[_coupon(min_purchase=Money.of("500"))])
        with pytest.raises(ValidationError, match="Minimum purchase of ₪500.00 required"):
            _validate(uow, "SPRING20", "100")

    def test_validation_writes_nothing(self):
        uow = FakeUnitOfWork(coupons=[_coupon()])
        _validate(uow, "SPRING20", "100")
        assert uow.commits == 0
        assert uow.coupons.get_by_id("c1").usage_count == 0
