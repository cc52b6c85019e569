"""Application service: Adjust Inventory use case.

Applies a signed quantity delta to one product. The product update, the
log entry and any threshold alert commit in one unit of work; a rejected
adjustment writes nothing.
"""

from __future__ import annotations

from storefront.application.dto import (
    AdjustmentDTO,
    AlertDTO,
    InventoryLogDTO,
    ProductDTO,
)
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.inventory import InventoryChangeType
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_ledger import InventoryLedger


def parse_change_type(value: str) -> InventoryChangeType:
    try:
        return InventoryChangeType(value.upper())
    except ValueError:
        raise ValidationError(f"Unknown inventory change type: {value}") from None


class AdjustInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: str | None,
        quantity: int | None,
        change_type: str | None,
        reason: str | None = None,
        actor_id: str | None = None,
    ) -> AdjustmentDTO:
        if not product_id or quantity is None or not change_type:
            raise ValidationError("Missing required fields")
        kind = parse_change_type(change_type)

        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError("Product not found")

            entry = InventoryLedger(uow).apply(
                product,
                product.inventory + quantity,
                kind,
                reason,
                actor_id=actor_id,
            )
            uow.commit()

        return AdjustmentDTO(
            product=ProductDTO.from_domain(entry.product),
            log=InventoryLogDTO.from_domain(entry.log),
            alert=AlertDTO.from_domain(entry.alert) if entry.alert else None,
        )
