"""Unit tests for the Product aggregate and its variants."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import Product, ProductVariant
from storefront.domain.model.value_objects import Money


def _ring(**kwargs) -> Product:
    return Product(id="p1", name="Gold Ring", price=Money.of("500"), **kwargs)


class TestInventory:

    def test_in_stock_follows_initial_inventory(self):
        assert _ring(inventory=3).in_stock is True
        assert _ring(inventory=0).in_stock is False

    def test_set_inventory_keeps_in_stock_in_sync(self):
        product = _ring(inventory=3)
        product.set_inventory(0)
        assert product.inventory == 0
        assert product.in_stock is False
        product.set_inventory(8)
        assert product.in_stock is True

    def test_negative_inventory_rejected(self):
        product = _ring(inventory=3)
        with pytest.raises(ValidationError, match="Insufficient inventory"):
            product.set_inventory(-1)
        assert product.inventory == 3

    def test_low_stock_excludes_zero(self):
        assert _ring(inventory=5, low_stock_threshold=5).is_low_stock is True
        assert _ring(inventory=6, low_stock_threshold=5).is_low_stock is False
        assert _ring(inventory=0, low_stock_threshold=5).is_low_stock is False

    def test_needs_reorder(self):
        assert _ring(inventory=4, reorder_point=4).needs_reorder is True
        assert _ring(inventory=5, reorder_point=4).needs_reorder is False
        assert _ring(inventory=0).needs_reorder is False


class TestVariants:

    def _variant(self, vid: str, **kwargs) -> ProductVariant:
        return ProductVariant(id=vid, product_id="p1", name=f"Size {vid}", **kwargs)

    def test_find_variant(self):
        product = _ring(variants=[self._variant("6"), self._variant("7")])
        assert product.find_variant("7").name == "Size 7"

    def test_unknown_variant(self):
        with pytest.raises(EntityNotFoundError, match="Product variant not found"):
            _ring().find_variant("9")

    def test_only_one_default(self):
        product = _ring()
        product.add_variant(self._variant("6", is_default=True))
        product.add_variant(self._variant("7", is_default=True))
        assert product.default_variant.id == "7"
        assert [v.is_default for v in product.variants] == [False, True]

    def test_variant_of_other_product_rejected(self):
        stray = ProductVariant(id="x", product_id="p2", name="Other")
        with pytest.raises(ValidationError, match="belongs to product"):
            _ring().add_variant(stray)

    def test_duplicate_variant_rejected(self):
        product = _ring(variants=[self._variant("6")])
        with pytest.raises(ValidationError, match="already exists"):
            product.add_variant(self._variant("6"))

    def test_effective_price(self):
        base = Money.of("500")
        assert self._variant("6").effective_price(base) == base
        assert self._variant("6", price=Money.of("650")).effective_price(base) == Money.of("650")
        adjusted = self._variant("6", price_adjustment=Decimal("25"))
        assert adjusted.effective_price(base) == Money.of("525")

    def test_variant_inventory_cannot_go_negative(self):
        variant = self._variant("6", inventory=1)
        with pytest.raises(ValidationError, match="Insufficient inventory"):
            variant.set_inventory(-1)

    def test_variant_in_stock_follows_initial_inventory(self):
        assert self._variant("6", inventory=2).in_stock is True
        assert self._variant("7").in_stock is False
