"""Application service: Add Product use case."""

from __future__ import annotations

from storefront.application.dto import ProductDTO
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.inventory import InventoryChangeType, new_id
from storefront.domain.model.product import DEFAULT_LOW_STOCK_THRESHOLD, Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_ledger import InventoryLedger

INITIAL_STOCK_REASON = "Initial stock"


class AddProductHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        currency: str = "ILS",
        default_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ) -> None:
        self._uow = uow
        self._currency = currency
        self._default_threshold = default_threshold

    def handle(
        self,
        name: str,
        price: str,
        sku: str | None = None,
        inventory: int = 0,
        low_stock_threshold: int | None = None,
    ) -> ProductDTO:
        """Add a new product to the catalog.

        Opening stock goes through the ledger as a RESTOCK so the product's
        count always matches its log.
        """
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if inventory < 0:
            raise ValidationError("Initial inventory cannot be negative")

        with self._uow as uow:
            if sku and uow.products.get_by_sku(sku) is not None:
                raise ValidationError(f"SKU '{sku}' already exists")

            product = Product(
                id=new_id(),
                name=name.strip(),
                price=Money.of(price, self._currency),
                sku=sku,
                low_stock_threshold=(
                    self._default_threshold if low_stock_threshold is None else low_stock_threshold
                ),
            )
            uow.products.save(product)
            if inventory > 0:
                InventoryLedger(uow).apply(
                    product, inventory, InventoryChangeType.RESTOCK, INITIAL_STOCK_REASON,
                )
            uow.commit()

        return ProductDTO.from_domain(product)
