"""Unit tests for the Coupon aggregate."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.coupon import Coupon, DiscountType
from storefront.domain.model.value_objects import Money

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


class TestCreate:

    def test_code_is_upper_cased(self):
        coupon = Coupon.create("c1", " spring20 ", DiscountType.FIXED, Decimal("50"), NOW)
        assert coupon.code == "SPRING20"

    @pytest.mark.parametrize("code", ["AB", "A" * 21, "SPRING 20", "ÉTÉ10"])
    def test_bad_code_rejected(self, code):
        with pytest.raises(ValidationError, match="3-20 characters"):
            Coupon.create("c1", code, DiscountType.FIXED, Decimal("50"), NOW)

    def test_percentage_over_100_rejected(self):
        with pytest.raises(ValidationError, match="cannot exceed 100%"):
            Coupon.create("c1", "HALF", DiscountType.PERCENTAGE, Decimal("101"), NOW)

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError, match="End date must be after start date"):
            Coupon.create(
                "c1", "HALF", DiscountType.PERCENTAGE, Decimal("50"), NOW,
                valid_to=NOW - timedelta(days=1),
            )

    def test_zero_value_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Coupon.create("c1", "ZERO", DiscountType.FIXED, Decimal("0"), NOW)


class TestEligibility:

    def test_inactive(self):
        with pytest.raises(ValidationError, match="no longer active"):
            _coupon(active=False).check_eligibility(NOW)

    def test_not_yet_valid(self):
        with pytest.raises(ValidationError, match="not yet valid"):
            _coupon(valid_from=NOW + timedelta(hours=1)).check_eligibility(NOW)

    def test_expired(self):
        with pytest.raises(ValidationError, match="has expired"):
            _coupon(valid_to=NOW - timedelta(seconds=1)).check_eligibility(NOW)

    def test_usage_limit_reached(self):
        with pytest.raises(ValidationError, match="reached its usage limit"):
            _coupon(usage_limit=10, usage_count=10).check_eligibility(NOW)

    def test_inactive_checked_before_expiry(self):
        coupon = _coupon(active=False, valid_to=NOW - timedelta(days=1))
        with pytest.raises(ValidationError, match="no longer active"):
            coupon.check_eligibility(NOW)

    def test_per_user_limit(self):
        coupon = _coupon(usage_per_user=1)
        coupon.check_user_usage(0)
        with pytest.raises(ValidationError, match="already used this coupon"):
            coupon.check_user_usage(1)

    def test_minimum_purchase_message(self):
        coupon = _coupon(min_purchase=Money.of("300"))
        with pytest.raises(ValidationError, match="Minimum purchase of ₪300.00 required"):
            coupon.check_minimum(Money.of("299.99"))
        coupon.check_minimum(Money.of("300"))


class TestDiscount:

    def test_percentage_capped_by_max_discount(self):
        coupon = _coupon(max_discount=Money.of("150"))
        assert coupon.discount_for(Money.of("1000")) == Money.of("150")

    def test_percentage_below_cap(self):
        coupon = _coupon(max_discount=Money.of("150"))
        assert coupon.discount_for(Money.of("500")) == Money.of("100")

    def test_fixed_capped_at_subtotal(self):
        coupon = _coupon(discount_type=DiscountType.FIXED, discount_value=Decimal("100"))
        assert coupon.discount_for(Money.of("50")) == Money.of("50")

    def test_redeem_counts_use(self):
        coupon = _coupon()
        coupon.redeem()
        coupon.redeem()
        assert coupon.usage_count == 2
