"""Product aggregate.

A product owns its variants and its on-hand stock count. Every write to
``inventory`` goes through ``set_inventory`` so ``in_stock`` can never
drift from the count.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.value_objects import Money

DEFAULT_LOW_STOCK_THRESHOLD = 5


@dataclass
class ProductVariant:
    """A purchasable configuration of a product, e.g. a ring size.

    ``price`` overrides the product price outright; otherwise
    ``price_adjustment`` is added to it.
    """

    id: str
    product_id: str
    name: str
    sku: str | None = None
    inventory: int = 0
    in_stock: bool = False
    price: Money | None = None
    price_adjustment: Decimal | None = None
    low_stock_threshold: int | None = None
    is_default: bool = False

    def __post_init__(self) -> None:
        self.in_stock = self.inventory > 0

    def set_inventory(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Insufficient inventory")
        self.inventory = quantity
        self.in_stock = quantity > 0

    def effective_price(self, base: Money) -> Money:
        if self.price is not None:
            return self.price
        if self.price_adjustment is not None:
            return Money(base.amount + self.price_adjustment, base.currency)
        return base


@dataclass
class Product:
    """A product in the catalog.

    Invariant: ``in_stock == (inventory > 0)`` after every inventory write.
    """

    id: str
    name: str
    price: Money
    sku: str | None = None
    compare_price: Money | None = None
    category_id: str | None = None
    inventory: int = 0
    in_stock: bool = False
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    reorder_point: int | None = None
    reorder_quantity: int | None = None
    variants: list[ProductVariant] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.in_stock = self.inventory > 0

    # --- Inventory ------------------------------------------------------------

    def set_inventory(self, quantity: int) -> None:
        """Replace the on-hand count. Negative results are rejected, not clamped."""
        if quantity < 0:
            raise ValidationError("Insufficient inventory")
        self.inventory = quantity
        self.in_stock = quantity > 0

    @property
    def is_low_stock(self) -> bool:
        return 0 < self.inventory <= self.low_stock_threshold

    @property
    def needs_reorder(self) -> bool:
        return self.reorder_point is not None and self.inventory <= self.reorder_point

    # --- Variants -------------------------------------------------------------

    def find_variant(self, variant_id: str) -> ProductVariant:
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        raise EntityNotFoundError("Product variant not found")

    def add_variant(self, variant: ProductVariant) -> None:
        if variant.product_id != self.id:
            raise ValidationError(
                f"Variant '{variant.id}' belongs to product '{variant.product_id}'"
            )
        if any(v.id == variant.id for v in self.variants):
            raise ValidationError(f"Variant '{variant.id}' already exists")
        self.variants.append(variant)
        if variant.is_default:
            self.set_default_variant(variant.id)

    def set_default_variant(self, variant_id: str) -> None:
        """Mark one variant as default and clear the flag on the others."""
        target = self.find_variant(variant_id)
        for variant in self.variants:
            variant.is_default = variant is target

    @property
    def default_variant(self) -> ProductVariant | None:
        for variant in self.variants:
            if variant.is_default:
                return variant
        return None
