"""Integration tests for coupon validation and administration."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.application.manage_coupons import (
    CouponSpec,
    CreateCouponHandler,
    DeactivateCouponHandler,
    DeleteCouponHandler,
    ListCouponsHandler,
    RedeemCouponHandler,
    UpdateCouponHandler,
)
from storefront.application.validate_coupon import ValidateCouponHandler
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.order import CustomerInfo, Order, OrderLineItem
from storefront.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeUnitOfWork

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _spec(**overrides) -> CouponSpec:
    values = dict(
        code="welcome10",
        discount_type="percentage",
        discount_value=Decimal("10"),
        valid_from=NOW - timedelta(days=1),
    )
    values.update(overrides)
    return CouponSpec(**values)


def _create(uow: FakeUnitOfWork, **overrides):
    return CreateCouponHandler(uow).handle(_spec(**overrides))


class TestValidateCoupon:

    def test_percentage_example(self):
        uow = FakeUnitOfWork()
        _create(uow, code="BIG20", discount_value=Decimal("20"), max_discount=Decimal("150"))
        result = ValidateCouponHandler(uow, clock=lambda: NOW).handle("BIG20", 1000)

        assert result.valid is True
        assert result.discount == 150.0
        assert result.final_total == 850.0
        assert result.coupon.code == "BIG20"

    def test_fixed_example(self):
        uow = FakeUnitOfWork()
        _create(uow, code="HUNDRED", discount_type="FIXED", discount_value=Decimal("100"))
        result = ValidateCouponHandler(uow, clock=lambda: NOW).handle("hundred", "50")

        assert result.discount == 50.0
        assert result.final_total == 0.0

    def test_missing_code(self):
        with pytest.raises(ValidationError, match="Coupon code is required"):
            ValidateCouponHandler(FakeUnitOfWork()).handle("", 100)

    @pytest.mark.parametrize("subtotal", [-1, "abc", None])
    def test_bad_subtotal(self, subtotal):
        with pytest.raises(ValidationError, match="Subtotal must be a non-negative number"):
            ValidateCouponHandler(FakeUnitOfWork()).handle("ANY", subtotal)

    def test_expired(self):
        uow = FakeUnitOfWork()
        _create(uow, valid_to=NOW - timedelta(hours=1))
        with pytest.raises(ValidationError, match="has expired"):
            ValidateCouponHandler(uow, clock=lambda: NOW).handle("WELCOME10", 100)


class TestCreateCoupon:

    def test_normalizes_code(self):
        dto = _create(FakeUnitOfWork())
        assert dto.code == "WELCOME10"
        assert dto.discount_type == "PERCENTAGE"
        assert dto.usage_count == 0

    def test_duplicate_code(self):
        uow = FakeUnitOfWork()
        _create(uow)
        with pytest.raises(ValidationError, match="already exists"):
            _create(uow, code="Welcome10")

    def test_bad_type(self):
        with pytest.raises(ValidationError, match="PERCENTAGE or FIXED"):
            _create(FakeUnitOfWork(), discount_type="BOGO")

    def test_percentage_over_100(self):
        with pytest.raises(ValidationError, match="cannot exceed 100%"):
            _create(FakeUnitOfWork(), discount_value=Decimal("150"))


class TestUpdateCoupon:

    def test_replaces_terms_keeps_usage(self):
        uow = FakeUnitOfWork()
        created = _create(uow)
        RedeemCouponHandler(uow).handle(created.id)

        updated = UpdateCouponHandler(uow).handle(
            created.id, _spec(code="WELCOME15", discount_value=Decimal("15")),
        )
        assert updated.code == "WELCOME15"
        assert updated.discount_value == 15.0
        assert updated.usage_count == 1

    def test_end_before_start(self):
        uow = FakeUnitOfWork()
        created = _create(uow)
        with pytest.raises(ValidationError, match="End date must be after start date"):
            UpdateCouponHandler(uow).handle(
                created.id, _spec(valid_to=NOW - timedelta(days=5)),
            )
        assert ListCouponsHandler(uow).handle()[0].valid_to is None

    def test_unknown(self):
        with pytest.raises(EntityNotFoundError, match="Coupon not found"):
            UpdateCouponHandler(FakeUnitOfWork()).handle("nope", _spec())


class TestDeleteAndDeactivate:

    def test_delete_unused(self):
        uow = FakeUnitOfWork()
        created = _create(uow)
        DeleteCouponHandler(uow).handle(created.id)
        assert ListCouponsHandler(uow).handle() == []

    def test_delete_refused_once_ordered(self):
        uow = FakeUnitOfWork()
        created = _create(uow)
        with uow:
            uow.orders.save(Order(
                id=None,
                customer=CustomerInfo("Dana", "Levi", "dana@example.com"),
                items=[OrderLineItem("p1", "Ring", Quantity(1), Money.of("100"))],
                coupon_id=created.id,
            ))
            uow.commit()

        with pytest.raises(ValidationError, match="Consider deactivating it instead"):
            DeleteCouponHandler(uow).handle(created.id)

    def test_deactivate(self):
        uow = FakeUnitOfWork()
        _create(uow)
        assert DeactivateCouponHandler(uow).handle("welcome10").active is False
        with pytest.raises(ValidationError, match="no longer active"):
            ValidateCouponHandler(uow, clock=lambda: NOW).handle("WELCOME10", 100)

    def test_redeem_increments(self):
        uow = FakeUnitOfWork()
        created = _create(uow)
        RedeemCouponHandler(uow).handle(created.id)
        assert RedeemCouponHandler(uow).handle(created.id).usage_count == 2
