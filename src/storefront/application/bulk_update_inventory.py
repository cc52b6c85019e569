"""Application service: Bulk Inventory Update use case.

Items are processed in order, each in its own unit of work. A failing
item is reported in the result and never aborts or rolls back the others.
"""

from __future__ import annotations

import logging

from storefront.application.adjust_inventory import parse_change_type
from storefront.application.dto import BulkErrorDTO, BulkResultDTO, InventoryUpdateSpec
from storefront.domain.exceptions import DomainException, EntityNotFoundError, ValidationError
from storefront.domain.model.inventory import InventoryChangeType
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)

SET = "SET"
DEFAULT_REASON = "Bulk update"


class BulkUpdateInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, updates: list[InventoryUpdateSpec], actor_id: str | None = None) -> BulkResultDTO:
        if not isinstance(updates, list) or not updates:
            raise ValidationError("Invalid updates array")

        result = BulkResultDTO()
        for spec in updates:
            try:
                self._apply_one(spec, actor_id)
            except _ItemError as exc:
                result.failed += 1
                result.errors.append(BulkErrorDTO(exc.product_id, spec.sku, str(exc.__cause__)))
            except DomainException as exc:
                result.failed += 1
                result.errors.append(BulkErrorDTO(spec.product_id, spec.sku, str(exc)))
            except Exception as exc:
                logger.exception("bulk update item failed: %s", spec)
                result.failed += 1
                result.errors.append(BulkErrorDTO(spec.product_id, spec.sku, str(exc) or "Unknown error"))
            else:
                result.success += 1

        logger.info("bulk inventory update: %d ok, %d failed", result.success, result.failed)
        return result

    def _apply_one(self, spec: InventoryUpdateSpec, actor_id: str | None) -> None:
        if spec.quantity is None:
            raise ValidationError("Missing quantity")

        is_set = (spec.type or "").upper() == SET
        kind = InventoryChangeType.ADJUSTMENT
        if spec.type and not is_set:
            kind = parse_change_type(spec.type)

        with self._uow as uow:
            if spec.product_id:
                product = uow.products.get_by_id(spec.product_id)
            elif spec.sku:
                product = uow.products.get_by_sku(spec.sku)
            else:
                product = None
            if product is None:
                raise EntityNotFoundError("Product not found")

            new_qty = spec.quantity if is_set else product.inventory + spec.quantity
            try:
                InventoryLedger(uow).apply(
                    product,
                    new_qty,
                    kind,
                    spec.reason or DEFAULT_REASON,
                    actor_id=actor_id,
                )
            except DomainException as exc:
                raise _ItemError(product.id) from exc
            uow.commit()


class _ItemError(Exception):
    """A ledger rejection for an item whose product was already found."""

    def __init__(self, product_id: str) -> None:
        super().__init__(product_id)
        self.product_id = product_id
