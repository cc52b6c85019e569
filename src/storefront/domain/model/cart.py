"""Shopper-held state: the cart and the wishlist.

Both are plain lists held by the client. The server only needs them to
price a checkout and to merge a guest wishlist into a user's saved one.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money

GUEST_WISHLIST_LIMIT = 20
GUEST_WARNING_AT = 18


@dataclass
class CartLine:
    product_id: str
    name: str
    price: Money
    quantity: int = 1
    variant_id: str | None = None

    @property
    def key(self) -> tuple[str, str | None]:
        return self.product_id, self.variant_id

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity


@dataclass
class Cart:
    lines: list[CartLine] = field(default_factory=list)

    def add(self, line: CartLine) -> None:
        """Add a line, merging quantity into an existing product+variant line."""
        if line.quantity <= 0:
            raise ValidationError("Quantity must be positive")
        existing = self._find(line.product_id, line.variant_id)
        if existing is not None:
            existing.quantity += line.quantity
        else:
            self.lines.append(line)

    def update_quantity(self, product_id: str, quantity: int, variant_id: str | None = None) -> None:
        if quantity <= 0:
            self.remove(product_id, variant_id)
            return
        existing = self._find(product_id, variant_id)
        if existing is not None:
            existing.quantity = quantity

    def remove(self, product_id: str, variant_id: str | None = None) -> None:
        self.lines = [line for line in self.lines if line.key != (product_id, variant_id)]

    def clear(self) -> None:
        self.lines = []

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    def total_price(self, currency: str = "ILS") -> Money:
        total = Money.zero(currency)
        for line in self.lines:
            total = total + line.line_total
        return total

    def _find(self, product_id: str, variant_id: str | None) -> CartLine | None:
        for line in self.lines:
            if line.key == (product_id, variant_id):
                return line
        return None


@dataclass
class Wishlist:
    """Ordered, duplicate-free list of product ids.

    Guests are capped at ``limit`` items; ``add`` returns a warning string
    once a guest list is close to the cap.
    """

    product_ids: list[str] = field(default_factory=list)
    authenticated: bool = False
    limit: int = GUEST_WISHLIST_LIMIT

    def add(self, product_id: str) -> str | None:
        if product_id in self.product_ids:
            raise ValidationError("Already in your favorites")
        count = len(self.product_ids)
        if not self.authenticated and count >= self.limit:
            raise ValidationError(
                "Wishlist limit reached! Sign in to save unlimited favorites"
            )
        self.product_ids.append(product_id)
        if not self.authenticated and count >= GUEST_WARNING_AT:
            return f"{self.limit - count - 1} spots left! Sign in to save unlimited favorites"
        return None

    def remove(self, product_id: str) -> None:
        if product_id in self.product_ids:
            self.product_ids.remove(product_id)

    def toggle(self, product_id: str) -> bool:
        """Add or remove; returns True when the product is now in the list."""
        if product_id in self.product_ids:
            self.remove(product_id)
            return False
        self.add(product_id)
        return True

    def __contains__(self, product_id: str) -> bool:
        return product_id in self.product_ids

    def merge(self, other_ids: list[str]) -> None:
        """Union with another list, keeping existing order first."""
        for product_id in other_ids:
            if product_id not in self.product_ids:
                self.product_ids.append(product_id)
