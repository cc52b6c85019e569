"""Integration tests for the BulkUpdateInventory use case."""

import pytest

from storefront.application.bulk_update_inventory import BulkUpdateInventoryHandler
from storefront.application.dto import InventoryUpdateSpec
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.inventory import InventoryChangeType
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork


def _setup() -> tuple[BulkUpdateInventoryHandler, FakeUnitOfWork]:
    uow = FakeUnitOfWork([
        Product(id="p1", name="Ring", price=Money.of("500"), sku="RNG-1", inventory=10),
        Product(id="p2", name="Bracelet", price=Money.of("250"), sku="BRC-1", inventory=8),
    ])
    return BulkUpdateInventoryHandler(uow), uow


class TestBulkUpdate:

    def test_missing_item_does_not_stop_the_others(self):
        handler, uow = _setup()
        result = handler.handle([
            InventoryUpdateSpec(quantity=5, type="RESTOCK", product_id="p1"),
            InventoryUpdateSpec(quantity=5, type="RESTOCK", product_id="missing"),
            InventoryUpdateSpec(quantity=-2, type="DAMAGE", sku="BRC-1"),
        ])

        assert result.success == 2
        assert result.failed == 1
        assert result.errors[0].product_id == "missing"
        assert result.errors[0].error == "Product not found"
        assert uow.products.get_by_id("p1").inventory == 15
        assert uow.products.get_by_id("p2").inventory == 6

    def test_rejection_by_sku_reports_resolved_product(self):
        handler, uow = _setup()
        result = handler.handle([InventoryUpdateSpec(quantity=-20, type="SALE", sku="BRC-1")])

        [error] = result.errors
        assert (error.product_id, error.sku, error.error) == ("p2", "BRC-1", "Insufficient inventory")
        assert uow.products.get_by_id("p2").inventory == 8

    def test_set_is_absolute_and_logged_as_adjustment(self):
        handler, uow = _setup()
        handler.handle([InventoryUpdateSpec(quantity=3, type="SET", product_id="p1")])

        log = uow.inventory_logs.list(product_id="p1")[0]
        assert log.type == InventoryChangeType.ADJUSTMENT
        assert log.previous_qty == 10
        assert log.new_qty == 3
        assert log.quantity == -7
        assert log.reason == "Bulk update"

    def test_missing_type_defaults_to_adjustment(self):
        handler, uow = _setup()
        handler.handle([InventoryUpdateSpec(quantity=2, type=None, sku="RNG-1", reason="Count")])

        log = uow.inventory_logs.list()[0]
        assert log.type == InventoryChangeType.ADJUSTMENT
        assert log.reason == "Count"
        assert uow.products.get_by_id("p1").inventory == 12

    def test_failed_item_is_rolled_back(self):
        handler, uow = _setup()
        result = handler.handle([InventoryUpdateSpec(quantity=-20, type="LOSS", product_id="p1")])

        assert result.failed == 1
        assert result.errors[0].error == "Insufficient inventory"
        assert uow.products.get_by_id("p1").inventory == 10
        assert uow.inventory_logs.list() == []

    def test_missing_quantity_reported(self):
        handler, _ = _setup()
        result = handler.handle([InventoryUpdateSpec(quantity=None, type="RESTOCK", product_id="p1")])
        assert result.errors[0].error == "Missing quantity"

    def test_each_item_commits_separately(self):
        handler, uow = _setup()
        handler.handle([
            InventoryUpdateSpec(quantity=1, type="RESTOCK", product_id="p1"),
            InventoryUpdateSpec(quantity=1, type="RESTOCK", product_id="p2"),
        ])
        assert uow.commits == 2

    @pytest.mark.parametrize("updates", [[], None, "p1"])
    def test_invalid_updates_array(self, updates):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Invalid updates array"):
            handler.handle(updates)
