"""Domain service: Inventory Ledger.

Applies a stock change to a product (or one of its variants) and records
it: the new count, one log entry, and a threshold alert when the new
count is low or zero. All three writes go through the caller's unit of
work, so they commit or vanish together.

Alerts are never cleared here. A restock above the threshold leaves any
open LOW_STOCK/OUT_OF_STOCK alert in place until an operator acknowledges it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.inventory import (
    AlertType,
    InventoryAlert,
    InventoryChangeType,
    InventoryLog,
    alert_type_for_level,
    new_id,
)
from storefront.domain.model.product import Product, ProductVariant
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerEntry:
    product: Product
    log: InventoryLog
    alert: InventoryAlert | None


@dataclass(frozen=True)
class Availability:
    product_id: str
    inventory: int
    reserved: int

    @property
    def available(self) -> int:
        return self.inventory - self.reserved


class InventoryLedger:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def apply(
        self,
        product: Product,
        new_qty: int,
        change_type: InventoryChangeType,
        reason: str | None = None,
        *,
        actor_id: str | None = None,
        reference: str | None = None,
        skip_duplicate_alert: bool = False,
    ) -> LedgerEntry:
        """Set ``product.inventory`` to ``new_qty`` and record the change.

        Raises ValidationError("Insufficient inventory") before any write
        if ``new_qty`` is negative.
        """
        if new_qty < 0:
            raise ValidationError("Insufficient inventory")

        previous_qty = product.inventory
        product.set_inventory(new_qty)
        self._uow.products.save(product)

        log = InventoryLog.record(
            product.id, change_type, previous_qty, new_qty, reason,
            reference=reference, created_by=actor_id,
        )
        self._uow.inventory_logs.add(log)

        alert = self._raise_alert(
            product_id=product.id,
            variant_id=None,
            label=product.name,
            new_qty=new_qty,
            threshold=product.low_stock_threshold,
            skip_duplicate=skip_duplicate_alert,
        )
        logger.info(
            "inventory %s product=%s %d -> %d (%s)",
            change_type.value, product.id, previous_qty, new_qty, reason or "-",
        )
        return LedgerEntry(product=product, log=log, alert=alert)

    def apply_to_variant(
        self,
        product: Product,
        variant: ProductVariant,
        new_qty: int,
        change_type: InventoryChangeType,
        reason: str | None = None,
        *,
        actor_id: str | None = None,
        reference: str | None = None,
        skip_duplicate_alert: bool = False,
    ) -> LedgerEntry:
        """Variant counterpart of ``apply``.

        Without a variant threshold there is no LOW_STOCK alert, but reaching
        zero still raises OUT_OF_STOCK.
        """
        if new_qty < 0:
            raise ValidationError("Insufficient inventory")

        previous_qty = variant.inventory
        variant.set_inventory(new_qty)
        self._uow.products.save(product)

        log = InventoryLog.record(
            product.id, change_type, previous_qty, new_qty, reason,
            variant_id=variant.id, reference=reference, created_by=actor_id,
        )
        self._uow.inventory_logs.add(log)

        alert = self._raise_alert(
            product_id=product.id,
            variant_id=variant.id,
            label=f"Variant {variant.name}",
            new_qty=new_qty,
            threshold=variant.low_stock_threshold,
            skip_duplicate=skip_duplicate_alert,
        )
        logger.info(
            "inventory %s product=%s variant=%s %d -> %d",
            change_type.value, product.id, variant.id, previous_qty, new_qty,
        )
        return LedgerEntry(product=product, log=log, alert=alert)

    def availability(self, product: Product) -> Availability:
        reserved = sum(r.quantity for r in self._uow.reservations.list_active(product.id))
        return Availability(product_id=product.id, inventory=product.inventory, reserved=reserved)

    # --- Internal helpers -----------------------------------------------------

    def _raise_alert(
        self,
        product_id: str,
        variant_id: str | None,
        label: str,
        new_qty: int,
        threshold: int | None,
        skip_duplicate: bool,
    ) -> InventoryAlert | None:
        alert_type = alert_type_for_level(new_qty, threshold)
        if alert_type is None:
            return None
        if skip_duplicate and self._uow.alerts.find_open(product_id, variant_id, alert_type):
            return None

        if alert_type == AlertType.LOW_STOCK:
            message = f"{label} is running low ({new_qty} units remaining)"
        else:
            message = f"{label} is out of stock"

        alert = InventoryAlert(
            id=new_id(),
            product_id=product_id,
            variant_id=variant_id,
            type=alert_type,
            threshold=threshold if alert_type == AlertType.LOW_STOCK else None,
            message=message,
        )
        self._uow.alerts.save(alert)
        logger.info("alert %s raised for product=%s", alert_type.value, product_id)
        return alert
