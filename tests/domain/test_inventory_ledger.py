"""Unit tests for the InventoryLedger domain service."""

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.inventory import (
    AlertType,
    InventoryChangeType,
    StockReservation,
)
from storefront.domain.model.product import Product, ProductVariant
from storefront.domain.model.value_objects import Money
from storefront.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import FakeUnitOfWork


def _product(inventory: int = 10, threshold: int = 5) -> Product:
    return Product(
        id="p1", name="Gold Ring", price=Money.of("500"),
        inventory=inventory, low_stock_threshold=threshold,
    )


class TestApply:

    def test_updates_product_and_logs(self):
        uow = FakeUnitOfWork([_product(10)])
        with uow:
            product = uow.products.get_by_id("p1")
            entry = InventoryLedger(uow).apply(
                product, 14, InventoryChangeType.RESTOCK, "Supplier delivery", actor_id="admin",
            )
            uow.commit()

        assert entry.log.quantity == 4
        assert entry.log.created_by == "admin"
        assert entry.alert is None
        assert uow.products.get_by_id("p1").inventory == 14
        assert len(uow.inventory_logs.list()) == 1

    def test_low_stock_alert(self):
        uow = FakeUnitOfWork([_product(10)])
        with uow:
            entry = InventoryLedger(uow).apply(
                uow.products.get_by_id("p1"), 4, InventoryChangeType.SALE,
            )
            uow.commit()

        assert entry.alert.type == AlertType.LOW_STOCK
        assert entry.alert.threshold == 5
        assert entry.alert.message == "Gold Ring is running low (4 units remaining)"

    def test_out_of_stock_alert_has_no_threshold(self):
        uow = FakeUnitOfWork([_product(3)])
        with uow:
            entry = InventoryLedger(uow).apply(
                uow.products.get_by_id("p1"), 0, InventoryChangeType.LOSS,
            )
            uow.commit()

        assert entry.alert.type == AlertType.OUT_OF_STOCK
        assert entry.alert.threshold is None
        assert entry.product.in_stock is False

    def test_negative_rejected_before_any_write(self):
        uow = FakeUnitOfWork([_product(2)])
        with uow:
            with pytest.raises(ValidationError, match="Insufficient inventory"):
                InventoryLedger(uow).apply(
                    uow.products.get_by_id("p1"), -1, InventoryChangeType.DAMAGE,
                )
            assert uow.inventory_logs.list() == []
            assert uow.alerts.list() == []

    def test_restock_does_not_clear_alerts(self):
        uow = FakeUnitOfWork([_product(10)])
        with uow:
            ledger = InventoryLedger(uow)
            product = uow.products.get_by_id("p1")
            ledger.apply(product, 2, InventoryChangeType.SALE)
            ledger.apply(product, 50, InventoryChangeType.RESTOCK)
            uow.commit()

        open_alerts = uow.alerts.list(acknowledged=False)
        assert [a.type for a in open_alerts] == [AlertType.LOW_STOCK]

    def test_skip_duplicate_alert(self):
        uow = FakeUnitOfWork([_product(10)])
        with uow:
            ledger = InventoryLedger(uow)
            product = uow.products.get_by_id("p1")
            ledger.apply(product, 4, InventoryChangeType.SALE, skip_duplicate_alert=True)
            second = ledger.apply(product, 3, InventoryChangeType.SALE, skip_duplicate_alert=True)
            uow.commit()

        assert second.alert is None
        assert len(uow.alerts.list()) == 1

    def test_duplicates_raised_without_skip(self):
        uow = FakeUnitOfWork([_product(10)])
        with uow:
            ledger = InventoryLedger(uow)
            product = uow.products.get_by_id("p1")
            ledger.apply(product, 4, InventoryChangeType.ADJUSTMENT)
            ledger.apply(product, 3, InventoryChangeType.ADJUSTMENT)
            uow.commit()

        assert len(uow.alerts.list()) == 2


class TestVariants:

    def _product_with_variant(self, threshold: int | None) -> Product:
        product = _product(10)
        product.variants.append(
            ProductVariant(id="v6", product_id="p1", name="Size 6", inventory=3,
                           low_stock_threshold=threshold)
        )
        return product

    def test_variant_stock_changes_product_unchanged(self):
        uow = FakeUnitOfWork([self._product_with_variant(threshold=2)])
        with uow:
            product = uow.products.get_by_id("p1")
            entry = InventoryLedger(uow).apply_to_variant(
                product, product.find_variant("v6"), 1, InventoryChangeType.SALE,
            )
            uow.commit()

        saved = uow.products.get_by_id("p1")
        assert saved.inventory == 10
        assert saved.find_variant("v6").inventory == 1
        assert entry.log.variant_id == "v6"
        assert entry.alert.message == "Variant Size 6 is running low (1 units remaining)"

    def test_variant_without_threshold_only_alerts_at_zero(self):
        uow = FakeUnitOfWork([self._product_with_variant(threshold=None)])
        with uow:
            product = uow.products.get_by_id("p1")
            entry = InventoryLedger(uow).apply_to_variant(
                product, product.find_variant("v6"), 1, InventoryChangeType.SALE,
            )
        assert entry.alert is None


class TestAvailability:

    def test_active_reservations_reduce_available(self):
        uow = FakeUnitOfWork([_product(10)])
        with uow:
            uow.reservations.save(StockReservation(id="r1", product_id="p1", quantity=3))
            released = StockReservation(id="r2", product_id="p1", quantity=4)
            released.release()
            uow.reservations.save(released)

            availability = InventoryLedger(uow).availability(uow.products.get_by_id("p1"))

        assert availability.reserved == 3
        assert availability.available == 7
